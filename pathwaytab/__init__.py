"""
pathwaytab — factor graph construction for gene-regulatory pathways.

Expands a pathway description (entities + interactions) into a directed
graph of three-state random variables and emits one conditional probability
table per variable with parents, ready for an external inference engine.

Pipeline:
    - Interaction map: symbol → (from species, to species, polarity)
    - Central dogma: genome → mRNA → protein → active, per protein entity
    - Vote factors: majority vote over parent states, smoothed by epsilon
    - Sharing groups: factors tied together for the EM maximization step
"""

__version__ = "0.1.0"

from .construct import build_pathway, construct  # noqa: F401 — public API
from .config import DataConfig, FactorConfig  # noqa: F401
from .errors import FormatError, PathwayError, UnknownInteractionError  # noqa: F401
from .factors import Factor, Variable, VoteFactorGenerator  # noqa: F401
from .graph import Node, PathwayGraph  # noqa: F401
from .sharing import SharingKey  # noqa: F401
from .tables import CentralDogmaTemplate, InteractionMap  # noqa: F401
