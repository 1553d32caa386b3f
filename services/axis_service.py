from typing import Dict, Iterable, List

from models.common_models import AxisCandidates, AxisOption, FieldProfile


def axis_label(name: str) -> str:
    # Only the first character changes, unlike str.capitalize()
    return name[:1].upper() + name[1:]


def _options(names: Iterable[str]) -> List[AxisOption]:
    return [AxisOption(value=n, label=axis_label(n)) for n in names]


def recommend_axes(profiles: Dict[str, FieldProfile]) -> AxisCandidates:
    """
    X candidates are categorical fields, Y candidates numerical ones, both in
    field-discovery order. An empty list falls back to every known field so
    the user always has something to pick; the validator decides later.
    """
    x_names = [name for name, p in profiles.items() if p.classified_as_categorical]
    y_names = [name for name, p in profiles.items() if p.classified_as_numerical_candidate]

    if not x_names:
        x_names = list(profiles)
    if not y_names:
        y_names = list(profiles)

    return AxisCandidates(x_candidates=_options(x_names), y_candidates=_options(y_names))
