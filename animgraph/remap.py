"""Clip remapping: swap the clips a graph uses for clips from another folder.

Typical flow: collect the clip names a graph uses, plan a replacement for
each (optionally auto-matching by name), then apply the plan through a
resolver.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from animgraph.animation_resolver import AnimationResolver
from animgraph.ir.model import ClipRef, Graph, State, StateKind

logger = logging.getLogger(__name__)


def collect_clip_names(graph: Graph) -> List[str]:
    """Distinct clip names used by animation states and blend motions, first-seen order."""
    names: Dict[str, None] = {}
    for state in graph.states():
        if state.kind == StateKind.BLEND_TREE:
            if state.blend_tree is None:
                continue
            for motion in state.blend_tree.motions:
                name = motion.clip.name if motion.clip else motion.animation_name
                if name:
                    names.setdefault(name, None)
        else:
            name = state.clip.name if state.clip else state.name
            if name:
                names.setdefault(name, None)
    return list(names)


def plan_replacements(
    source_names: Iterable[str],
    available: Iterable[str],
    auto_match: bool = False,
    source_filter: str = "",
    destination_filter: str = "",
) -> Dict[str, str]:
    """Map each source clip name to its replacement.

    Filters are case-insensitive substrings. Without ``auto_match`` every name
    maps to itself; with it, to the first available name containing it.
    """
    options = [a for a in available if not destination_filter or destination_filter.lower() in a.lower()]
    plan: Dict[str, str] = {}
    for name in source_names:
        if source_filter and source_filter.lower() not in name.lower():
            continue
        replacement = name
        if auto_match:
            match = next((o for o in options if name.lower() in o.lower()), None)
            replacement = match or name
        plan[name] = replacement
    return plan


def _all_states(graph: Graph) -> List[State]:
    states: Dict[int, State] = {}
    for transition in graph.transitions:
        for state in (transition.from_state, transition.to_state):
            states.setdefault(id(state), state)
    return list(states.values())


class _Replacer:
    def __init__(self, replacements: Dict[str, str], resolver: AnimationResolver, search_scope: str, safety_check: bool):
        self.replacements = replacements
        self.resolver = resolver
        self.search_scope = search_scope
        self.safety_check = safety_check

    def replacement_for(self, original: str) -> Optional[ClipRef]:
        target = self.replacements.get(original)
        if target is None:
            return None
        if target == original and self.safety_check:
            return None
        clip = self.resolver.find(target, self.search_scope)
        if clip is None:
            logger.warning("No replacement clip found for '%s' (wanted '%s')", original, target)
        return clip


def apply_replacements(
    graph: Graph,
    replacements: Dict[str, str],
    resolver: AnimationResolver,
    search_scope: str = "",
    safety_check: bool = False,
) -> int:
    """Rewrite clip references in place; returns how many clips were replaced.

    With ``safety_check`` a name mapped to itself is left alone. Animation
    states take the replacement clip's name, since documents identify such a
    state by its clip. Shared blend trees are rewritten once.
    """
    replacer = _Replacer(replacements, resolver, search_scope, safety_check)
    replaced = 0
    visited_trees = set()
    for state in _all_states(graph):
        if state.kind == StateKind.BLEND_TREE:
            tree = state.blend_tree
            if tree is None or id(tree) in visited_trees:
                continue
            visited_trees.add(id(tree))
            for motion in tree.motions:
                original = motion.clip.name if motion.clip else motion.animation_name
                clip = replacer.replacement_for(original)
                if clip is not None:
                    motion.clip = clip
                    motion.animation_name = clip.name
                    replaced += 1
        else:
            original = state.clip.name if state.clip else state.name
            clip = replacer.replacement_for(original)
            if clip is not None:
                state.clip = clip
                state.name = clip.name
                replaced += 1

    if replaced:
        logger.info("Successfully replaced %d animations", replaced)
    else:
        logger.warning("No animations were replaced. Check the replacement mappings and animation names.")
    return replaced
