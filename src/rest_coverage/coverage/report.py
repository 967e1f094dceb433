"""Coverage summary over a (possibly recorded) coverage map."""

from pydantic import BaseModel, computed_field

from rest_coverage.parser.base import CoverageMap


class CoverageSummary(BaseModel):
    endpoints_total: int
    endpoints_called: int
    params_total: int
    params_hit: int
    uncalled: list[str]

    @computed_field
    @property
    def endpoint_coverage(self) -> float:
        return _percent(self.endpoints_called, self.endpoints_total)

    @computed_field
    @property
    def params_coverage(self) -> float:
        return _percent(self.params_hit, self.params_total)


def summarize(coverage_map: CoverageMap) -> CoverageSummary:
    """Aggregate endpoint and parameter coverage over every record."""
    records = [stats for methods in coverage_map.values() for stats in methods.values()]
    return CoverageSummary(
        endpoints_total=len(records),
        endpoints_called=sum(1 for s in records if s.method_called),
        params_total=sum(s.params_num for s in records),
        params_hit=sum(s.params_hit for s in records),
        uncalled=sorted(f"{s.method} {s.path}" for s in records if not s.method_called),
    )


def render_summary(summary: CoverageSummary) -> str:
    """Render a summary as plain text."""
    lines = [
        f"Endpoints: {summary.endpoints_called}/{summary.endpoints_total} "
        f"({summary.endpoint_coverage:.1f}%)",
        f"Parameters: {summary.params_hit}/{summary.params_total} "
        f"({summary.params_coverage:.1f}%)",
    ]
    if summary.uncalled:
        lines.append("")
        lines.append("Not called:")
        lines.extend(f"  {endpoint}" for endpoint in summary.uncalled)
    return "\n".join(lines)


def _percent(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(100.0 * part / total, 2)
