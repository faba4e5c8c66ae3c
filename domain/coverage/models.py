"""Coverage Bounded Context - Propagation Model Catalog.

Predefined, immutable catalog entries. Antennas reference one of these;
`get_propagation_model` is the lookup used when configuring an antenna.
"""

from __future__ import annotations

from types import MappingProxyType

from domain.coverage.errors import UnknownPropagationModelError
from domain.coverage.value_objects import PropagationModel, PropagationModelKind

FREE_SPACE = PropagationModel(
    kind=PropagationModelKind.FREE_SPACE,
    name="Free-Space",
    description=(
        "Ideal free-space propagation for line-of-sight and satellite links. "
        "PL = 20*log10(d_km) + 20*log10(f_MHz) + 32.45"
    ),
)

COST231_HATA = PropagationModel(
    kind=PropagationModelKind.COST231_HATA,
    name="COST-231-Hata",
    description=(
        "Empirical urban/suburban macro-cell model accounting for base station "
        "height and building density. Valid for 1500-2000 MHz."
    ),
    parameters={
        "city_type": 1,  # 1 = large city, 0 = medium/small city
        "terrain_type": 1,  # 1 = urban, 0 = suburban
    },
)

ITU_INDOOR = PropagationModel(
    kind=PropagationModelKind.ITU_INDOOR,
    name="ITU Indoor",
    description=(
        "Simplified ITU indoor model: free-space loss plus wall and per-floor "
        "penetration penalties."
    ),
    parameters={
        "floors": 1,
        "wall_loss": 12,
    },
)

RAY_TRACING = PropagationModel(
    kind=PropagationModelKind.RAY_TRACING,
    name="Ray-Tracing",
    description=(
        "Approximate multipath model: free-space loss plus a uniform random "
        "0-10 dB penalty. Not a physical ray tracer; results are not "
        "reproducible across calls."
    ),
    parameters={
        "max_reflections": 3,
        "min_signal_level": -120,
    },
)

PROPAGATION_MODELS: MappingProxyType[PropagationModelKind, PropagationModel] = (
    MappingProxyType(
        {
            model.kind: model
            for model in (FREE_SPACE, COST231_HATA, ITU_INDOOR, RAY_TRACING)
        }
    )
)


def get_propagation_model(kind: PropagationModelKind | str) -> PropagationModel:
    """Look up a catalog entry by kind.

    Args:
        kind: A PropagationModelKind or its string value (e.g. "itu-indoor")

    Returns:
        The catalog PropagationModel

    Raises:
        UnknownPropagationModelError: If kind is not in the catalog
    """
    try:
        return PROPAGATION_MODELS[PropagationModelKind(kind)]
    except (ValueError, KeyError):
        raise UnknownPropagationModelError(kind) from None
