"""Search rules loaded from a YAML file.

Example rules file:

    rules:
      - id: public
        name: Public notes
        excluded_paths: [templates/, archive/]
        property_filters:
          - {key: access, operator: equals, value: public}
        recent: {enabled: true, priority: 1, bypass_filters: true}
        backlinks: {priority: 2}
        extend_results: true
    workspaces:
      writing: [public]
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from jump_mcp.ranking.models import GroupPriority, PropertyFilter, RankingPolicy

logger = logging.getLogger(__name__)

GROUP_FIELDS = ("recent", "outgoing", "backlinks", "two_hop")
FLAG_FIELDS = (
    "extend_results",
    "filter_related_documents",
    "fallback_to_all",
    "search_in_tags",
    "search_in_properties",
)


def create_default_rule(rule_id: str = "default", name: str = "Default") -> RankingPolicy:
    """A rule with no filters and the standard group priorities."""
    return RankingPolicy(id=rule_id, name=name)


def _flag(value: object, where: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{where} must be true or false, got {value!r}")
    return value


def _group_from_dict(data: object, default: GroupPriority, where: str) -> GroupPriority:
    if data is None:
        return default
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be a mapping")
    try:
        return GroupPriority(
            enabled=_flag(data.get("enabled", default.enabled), "enabled"),
            priority=int(data.get("priority", default.priority)),
            bypass_filters=_flag(
                data.get("bypass_filters", default.bypass_filters),
                "bypass_filters",
            ),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {where}: {e}") from e


def _filter_from_dict(data: object, where: str) -> PropertyFilter:
    if not isinstance(data, dict) or "key" not in data:
        raise ValueError(f"{where} must be a mapping with a 'key'")
    operator = data.get("operator", "exists")
    try:
        return PropertyFilter(
            key=str(data["key"]),
            operator=operator,
            value="" if data.get("value") is None else str(data["value"]),
        )
    except ValueError as e:
        raise ValueError(f"Invalid operator '{operator}' in {where}") from e


def policy_from_dict(data: object, index: int = 0) -> RankingPolicy:
    """
    Build a RankingPolicy from one entry of the rules file.

    Missing fields take the defaults of create_default_rule().

    Raises:
        ValueError: If the entry is malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"Rule #{index + 1} must be a mapping")

    rule_id = str(data.get("id", f"rule-{index + 1}"))
    where = f"rule '{rule_id}'"
    default = create_default_rule()

    excluded = data.get("excluded_paths") or []
    if isinstance(excluded, str):
        excluded = [excluded]
    filters = data.get("property_filters") or []
    if not isinstance(filters, list):
        raise ValueError(f"property_filters of {where} must be a list")

    groups = {
        name: _group_from_dict(data.get(name), getattr(default, name), f"{name} of {where}")
        for name in GROUP_FIELDS
    }
    flags = {
        name: _flag(data.get(name, getattr(default, name)), f"{name} of {where}")
        for name in FLAG_FIELDS
    }

    return RankingPolicy(
        id=rule_id,
        name=str(data.get("name", rule_id)),
        excluded_paths=tuple(str(p) for p in excluded),
        property_filters=tuple(
            _filter_from_dict(f, f"filter #{i + 1} of {where}") for i, f in enumerate(filters)
        ),
        **groups,
        **flags,
    )


@dataclass
class RuleSet:
    """Configured rules and the workspace-to-rule assignments."""

    rules: list[RankingPolicy] = field(default_factory=lambda: [create_default_rule()])
    workspaces: dict[str, list[str]] = field(default_factory=dict)

    @property
    def default(self) -> RankingPolicy:
        """The first rule, used when no rule is requested."""
        return self.rules[0]

    def get(self, rule_id: str | None) -> RankingPolicy | None:
        """Find a rule by ID, or the default rule when rule_id is None."""
        if rule_id is None:
            return self.default
        return next((rule for rule in self.rules if rule.id == rule_id), None)

    def rule_for_workspace(self, workspace: str) -> RankingPolicy | None:
        """First configured rule of a workspace that still exists."""
        for rule_id in self.workspaces.get(workspace, []):
            rule = self.get(rule_id)
            if rule is not None:
                return rule
        return None


def parse_rules(data: object) -> RuleSet:
    """Build a RuleSet from the parsed YAML document."""
    if data is None:
        return RuleSet()
    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping")

    entries = data.get("rules") or []
    if not isinstance(entries, list):
        raise ValueError("'rules' must be a list")
    rules = [policy_from_dict(entry, i) for i, entry in enumerate(entries)]

    ids = [rule.id for rule in rules]
    duplicates = sorted({rule_id for rule_id in ids if ids.count(rule_id) > 1})
    if duplicates:
        raise ValueError(f"Duplicate rule ids: {', '.join(duplicates)}")

    workspaces_raw = data.get("workspaces") or {}
    if not isinstance(workspaces_raw, dict):
        raise ValueError("'workspaces' must be a mapping")
    workspaces = {
        str(name): [str(v) for v in (value if isinstance(value, list) else [value])]
        for name, value in workspaces_raw.items()
    }

    if not rules:
        return RuleSet(workspaces=workspaces)
    return RuleSet(rules=rules, workspaces=workspaces)


def load_rules(path: Path) -> RuleSet:
    """
    Load rules from a YAML file.

    A missing file yields a single default rule.

    Raises:
        ValueError: If the file is not valid YAML or a rule is malformed
    """
    if not path.exists():
        logger.info("No rules file at %s, using default rule", path)
        return RuleSet()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in rules file {path}: {e}") from e

    rule_set = parse_rules(data)
    logger.info("Loaded %d rules from %s", len(rule_set.rules), path)
    return rule_set
