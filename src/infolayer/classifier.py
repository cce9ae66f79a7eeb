"""Split tile query results into configured sub-layers and resolve icons."""

from __future__ import annotations

from typing import Iterable, Sequence

from infolayer.models import (
    ClassifiedFeature,
    FeatureCollection,
    LayerFilterRule,
    RawFeature,
    feature_property,
)


def select_features(collection: FeatureCollection, rule: LayerFilterRule) -> list[RawFeature]:
    """Features a single rule picks, in collection order.

    With an icon mapping, a feature matches when its ``selection_key``
    value is one of the mapping's keys (any source layer). Without one
    (None or empty), it matches on ``tilequery.layer``.
    """
    if rule.has_icon_mapping:
        groups = rule.icons_by_selection_value
        return [
            f for f in collection
            if _is_group(feature_property(f, rule.selection_key), groups)
        ]
    return [f for f in collection if f.source_layer == rule.source_layer]


def _is_group(value, groups) -> bool:
    try:
        return value in groups
    except TypeError:  # unhashable property value
        return False


def resolve_icon(feature: RawFeature, rule: LayerFilterRule, icon_path: str) -> str:
    value = feature_property(feature, rule.selection_key)
    if rule.selection_key is None or value is None:
        return f"{icon_path}{rule.source_layer}.png"
    return f"{icon_path}{value}.png"


def classify(
    collection: FeatureCollection,
    rules: Iterable[LayerFilterRule],
    icon_path: str = "",
) -> list[ClassifiedFeature]:
    """Classify features rule by rule and concatenate the results.

    Rules are not exclusive: a feature matched by two rules shows up twice.

    Args:
        collection: Raw tile query result (not modified).
        rules: Filter rules, applied in order.
        icon_path: Prefix for every resolved icon file name.

    Returns:
        Classified features ordered by rule, then by collection order.
    """
    result: list[ClassifiedFeature] = []
    for rule in rules:
        for feature in select_features(collection, rule):
            result.append(ClassifiedFeature(feature, resolve_icon(feature, rule, icon_path)))
    return result


def layer_names(rules: Sequence[LayerFilterRule]) -> list[str]:
    """Distinct source layer names to query, in rule order."""
    return list(dict.fromkeys(rule.source_layer for rule in rules))
