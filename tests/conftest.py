"""Shared pytest fixtures and configuration.

This file is automatically loaded by pytest and provides fixtures
accessible to all tests.
"""

import pytest
from hypothesis import settings

from pathwaytab.graph import PathwayGraph

# Property tests build torch tables; the first call can be slow.
settings.register_profile("pathwaytab", max_examples=25, deadline=None)
settings.load_profile("pathwaytab")

# =============================================================================
# Pathway Fixtures
# =============================================================================

SMALL_PATHWAY = """\
protein\tTP53
protein\tMDM2
abstract\tDNA_damage
complex\tp53_mdm2
DNA_damage\tTP53\t-a>
TP53\tMDM2\t-t>
MDM2\tTP53\t-a|
TP53\tp53_mdm2\tcomponent>
MDM2\tp53_mdm2\tcomponent>
"""


@pytest.fixture
def small_pathway_text():
    return SMALL_PATHWAY


@pytest.fixture
def small_graph():
    return PathwayGraph.from_text(SMALL_PATHWAY)
