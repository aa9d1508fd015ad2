import dataclasses, os, pathlib, re, yaml
from typing import Any, Dict, Optional
from dotenv import load_dotenv

EXPORT_FORMATS = ("mmd", "dot")
STRATEGIES = ("tags", "internalLinks", "folders", "singleTag", "singleNote")
DIRECTIONS = ("TD", "LR", "RL", "BT")
SINGLE_ROOT_STRATEGIES = ("singleTag", "singleNote")

# built-in backoff caps, used unless manual_backoff is on
DEFAULT_MAX_NODES = 40
DEFAULT_MAX_RELATIONSHIPS = 60
DEFAULT_MAX_TAGS = 10
DEFAULT_MAX_E_PER_V = 10
DEFAULT_WEIGHT_THRESHOLD = 1

# persisted camelCase names -> field names
_ALIASES = {
    "exportFormat": "export_format",
    "includeOrphans": "include_orphans",
    "includeAttachments": "include_attachments",
    "lastExported": "last_exported",
    "includeWeights": "include_weights",
    "relationshipStrategy": "relationship_strategy",
    "weightThreshold": "weight_threshold",
    "maxEPerV": "max_e_per_v",
    "enableAutoBridge": "enable_auto_bridge",
    "manualBackoff": "manual_backoff",
    "maxNodes": "max_nodes",
    "maxRelationships": "max_relationships",
    "maxTags": "max_tags",
    "rootTag": "root_tag",
    "rootNote": "root_note",
}


@dataclasses.dataclass(frozen=True, slots=True)
class ExportSettings:
    """Immutable snapshot of the export settings record.

    Optional tunables may hold ``None`` or junk from a hand-edited file; the
    accessor methods apply the named fallback where the value is used.
    """

    export_format: str = "mmd"
    include_orphans: bool = False
    include_attachments: bool = False
    last_exported: str = ""
    include_weights: bool = False
    relationship_strategy: str = "tags"
    # dot
    weight_threshold: Any = DEFAULT_WEIGHT_THRESHOLD
    subgraphs: Any = False
    # mmd
    direction: Any = "TD"
    max_e_per_v: Any = DEFAULT_MAX_E_PER_V
    # mmd backoff
    enable_auto_bridge: bool = True
    manual_backoff: bool = False
    max_nodes: Any = DEFAULT_MAX_NODES
    max_relationships: Any = DEFAULT_MAX_RELATIONSHIPS
    max_tags: Any = DEFAULT_MAX_TAGS
    # single-root views
    root_tag: Optional[str] = None
    root_note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ExportSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for k, v in (data or {}).items():
            k = _ALIASES.get(k, k)
            if k in known:
                kwargs[k] = v
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes) -> "ExportSettings":
        return dataclasses.replace(self, **changes)

    # ------------------------------------------------------------------
    # Point-of-use fallbacks
    # ------------------------------------------------------------------
    def output_format(self) -> str:
        return self.export_format if self.export_format in EXPORT_FORMATS else "mmd"

    def strategy(self) -> str:
        return self.relationship_strategy if self.relationship_strategy in STRATEGIES else "tags"

    def is_single_view(self) -> bool:
        return self.strategy() in SINGLE_ROOT_STRATEGIES

    def graph_direction(self) -> str:
        return self.direction if self.direction in DIRECTIONS else "TD"

    def edge_cap_per_node(self) -> int:
        return _as_int(self.max_e_per_v, DEFAULT_MAX_E_PER_V)

    def min_weight(self) -> int:
        return _as_int(self.weight_threshold, DEFAULT_WEIGHT_THRESHOLD)

    def keep_orphans(self) -> bool:
        return _as_bool(self.include_orphans, False)

    def with_attachments(self) -> bool:
        return _as_bool(self.include_attachments, False)

    def show_weights(self) -> bool:
        return _as_bool(self.include_weights, False)

    def use_subgraphs(self) -> bool:
        return _as_bool(self.subgraphs, False)

    def auto_reduce(self) -> bool:
        return _as_bool(self.enable_auto_bridge, True)

    def backoff_caps(self):
        """Return ``(max_nodes, max_relationships, max_tags)`` for the reducer."""
        if not _as_bool(self.manual_backoff, False):
            return DEFAULT_MAX_NODES, DEFAULT_MAX_RELATIONSHIPS, DEFAULT_MAX_TAGS
        return (
            _as_int(self.max_nodes, DEFAULT_MAX_NODES),
            _as_int(self.max_relationships, DEFAULT_MAX_RELATIONSHIPS),
            _as_int(self.max_tags, DEFAULT_MAX_TAGS),
        )


def _as_int(value, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        out = int(value)
    except (TypeError, ValueError):
        return default
    return out if out >= 0 else default


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _as_bool(value, default: bool) -> bool:
    # ${VAR} expansion and quoted YAML both leave strings behind
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def settings_path() -> pathlib.Path:
    root = pathlib.Path(os.getenv("VGX_ROOT", ".vgx"))
    return root / "config" / "export.yml"


def load_settings(path: Optional[pathlib.Path] = None) -> ExportSettings:
    load_dotenv(override=True)
    path = path or settings_path()
    cfg = ExportSettings().to_dict()
    env_format = os.getenv("VGX_EXPORT_FORMAT")
    if env_format:
        cfg["export_format"] = env_format
    if path.exists():
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            cfg.update({_ALIASES.get(k, k): v for k, v in data.items()})
    return ExportSettings.from_dict({k: _expand_env_var(v) for k, v in cfg.items()})


def save_settings(settings: ExportSettings, path: Optional[pathlib.Path] = None) -> pathlib.Path:
    path = path or settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(settings.to_dict(), sort_keys=False), encoding="utf-8")
    return path


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")

def _expand_env_var(value):
    """Substitute ``${NAME}`` in a string setting; unset names stay literal."""
    if not isinstance(value, str):
        return value
    return _ENV_VAR_PATTERN.sub(lambda m: os.getenv(m.group(1), m.group(0)), value)
