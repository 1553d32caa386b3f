from models.common_models import AxisCandidates, AxisSelection, ChartKind, Dataset, RenderPayload


def build_render_payload(
    dataset: Dataset,
    candidates: AxisCandidates,
    chart_kind: ChartKind,
    selection: AxisSelection,
) -> RenderPayload:
    """
    Package a validated selection for the chart-drawing component.
    3D charts plot y_fields[0] on Y and y_fields[1] on Z; with a single
    Y field that series is reused for Z.
    """
    y_fields = list(selection.y_fields)
    z_field = None
    if chart_kind == ChartKind.three_dimensional:
        z_field = y_fields[1] if len(y_fields) > 1 else y_fields[0]

    return RenderPayload(
        records=dataset.records,
        x_field=selection.x_field,
        y_fields=y_fields,
        chart_kind=chart_kind,
        x_candidates=candidates.x_candidates,
        y_candidates=candidates.y_candidates,
        z_field=z_field,
    )
