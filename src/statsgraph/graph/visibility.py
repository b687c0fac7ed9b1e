"""
Visibility resolution.

Decides which normalized modules are drawn. Two filters compose:

1. Pattern filter: the hide pattern removes modules by raw name, unless the
   allow pattern keeps them.
2. Issuer reachability: a module stays only if it is an entry, or one of its
   issuers is another module that is itself still visible.

Reachability is iterated to a fixpoint. Hiding a module can orphan the
modules it issued, so a fixed number of passes under-converges on long
chains of hidden issuers. Each pass removes at least one module or stops,
so at most len(modules) passes run.
"""

import logging
from typing import Iterable, List, Set

from ..config import GraphConfig
from ..core.types import ModuleDescriptor

logger = logging.getLogger(__name__)


def passes_pattern_filter(module: ModuleDescriptor, config: GraphConfig) -> bool:
    allow = config.allow_regex
    if allow is not None and allow.search(module.name):
        return True

    hide = config.hide_regex
    if hide is not None and hide.search(module.name):
        return False
    return True


def is_reachable(module: ModuleDescriptor, visible_ids: Set[str]) -> bool:
    """Entry modules are always reachable; others need a visible issuer."""
    if module.is_entry:
        return True
    return any(
        issuer.graph_id != module.graph_id and issuer.graph_id in visible_ids
        for issuer in module.issuers
    )


def reachability_fixpoint(modules: Iterable[ModuleDescriptor]) -> List[ModuleDescriptor]:
    """
    Repeatedly drop unreachable modules until nothing changes.

    Input order is preserved in the result.
    """
    visible = list(modules)
    for iteration in range(len(visible) + 1):
        visible_ids = {m.graph_id for m in visible}
        kept = [m for m in visible if is_reachable(m, visible_ids)]
        if len(kept) == len(visible):
            logger.debug("Visibility converged after %d passes", iteration + 1)
            return kept
        visible = kept
    return visible


def resolve_visible(
    modules: Iterable[ModuleDescriptor],
    config: GraphConfig,
) -> List[ModuleDescriptor]:
    """
    Return the modules that should be rendered.

    Re-running this on its own output returns the same list.
    """
    candidates = [m for m in modules if passes_pattern_filter(m, config)]
    return reachability_fixpoint(candidates)
