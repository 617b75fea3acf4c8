"""
Project configuration: load, validate, and provide defaults for docs.yaml.
"""

import datetime
import os

import yaml


CONFIG_FILE = "docs.yaml"

# Formats a document type may request in the conversions table
KNOWN_FORMATS = ("html", "ebook", "pdf")

# Fields required in every docs.yaml
REQUIRED_FIELDS = ["conversions"]

# Defaults applied if missing
DEFAULTS = {
    "project_version": "",
    "document_date": None,
    "archive_name": "documentation-{version}",
    "analytics_marker": "<!-- Google Analytics script -->",
    "docs_dir": "docs",
    "scripts_dir": "scripts",
    "styles_dir": "styles",
    "templates_dir": "templates",
    "redirections_dir": "redirections",
    "build_dir": "build",
    "server": {},
    "tools": {},
}

# Directories under build_dir, used when not set explicitly
BUILD_LAYOUT = {
    "staging_dir": "tmp",
    "output_dir": "site",
    "webapp_dir": "jetty",
    "dist_dir": "distributions",
}

SERVER_DEFAULTS = {
    "host": "127.0.0.1",
    "port": 0,
    "stop_port": None,
    "stop_key": None,
}

TOOL_DEFAULTS = {
    "pandoc": "pandoc",
    "ebook_convert": "ebook-convert",
    "lessc": "lessc",
    "wkhtmltopdf": "wkhtmltopdf",
}

# SimpleDateFormat 'MMMM' in Locale.ENGLISH; strftime('%B') follows the process locale
MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class ConfigError(Exception):
    """Raised when docs.yaml is missing or invalid."""
    pass


class DocsConfig:
    """
    Loaded, validated documentation build configuration.

    Usage:
        config = DocsConfig.load("docs.yaml")
        config.project_version       # "2.1.0"
        config.output_doc_dir        # "/abs/build/site/doc"
        config.formats_for("manual") # {"html", "ebook", "pdf"}
    """

    def __init__(self, data, project_root):
        self._data = data
        self.project_root = project_root

    @classmethod
    def load(cls, path, overrides=None):
        """Load and validate a docs.yaml file, applying CLI overrides on top."""
        if not os.path.exists(path):
            raise ConfigError(f"No {os.path.basename(path)} found at {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ConfigError(
                f"{os.path.basename(path)} must be a YAML mapping, got {type(data).__name__}"
            )

        project_root = os.path.dirname(os.path.abspath(path))
        return cls.from_dict(data, project_root, overrides)

    @classmethod
    def from_dict(cls, data, project_root, overrides=None):
        data = dict(data)
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ConfigError(f"docs.yaml missing required fields: {', '.join(missing)}")

        data["conversions"] = _validate_conversions(data["conversions"])

        # Apply top-level defaults
        for key, default in DEFAULTS.items():
            data.setdefault(key, default if not isinstance(default, (list, dict)) else type(default)(default))

        data["server"] = dict(data["server"] or {})
        for key, default in SERVER_DEFAULTS.items():
            data["server"].setdefault(key, default)
        data["tools"] = dict(data["tools"] or {})
        for key, default in TOOL_DEFAULTS.items():
            data["tools"].setdefault(key, default)

        data["project_version"] = str(data["project_version"] or "")
        data["document_date"] = _parse_date(data["document_date"])

        # Resolve directories against the project root
        for key in ["docs_dir", "scripts_dir", "styles_dir", "templates_dir",
                    "redirections_dir", "build_dir"]:
            data[key] = _abspath(project_root, data[key])
        for key, name in BUILD_LAYOUT.items():
            value = data.get(key)
            data[key] = _abspath(project_root, value) if value else os.path.join(data["build_dir"], name)
        data.setdefault("output_doc_dir", os.path.join(data["output_dir"], "doc"))
        data["output_doc_dir"] = _abspath(project_root, data["output_doc_dir"])

        return cls(data, project_root)

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"DocsConfig has no field '{name}'")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    # ── Convenience ────────────────────────────────────────

    @property
    def staging_templates_dir(self):
        return os.path.join(self.staging_dir, "templates")

    @property
    def document_version(self):
        """The document date as 'yyyyMMdd - dd MMMM yyyy'."""
        d = self.document_date
        return f"{d:%Y%m%d} - {d.day:02d} {MONTHS[d.month - 1]} {d.year}"

    @property
    def archive_base_name(self):
        return self.archive_name.format(version=self.project_version)

    def tool(self, name):
        return self.tools[name]

    def formats_for(self, doc_type):
        """Formats requested for a document type; empty for unknown types."""
        return self.conversions.get(doc_type, frozenset())

    def summary(self):
        """Print a short config summary."""
        print(f"\n  Project: {self.project_root}")
        print(f"  Version: {self.project_version or '(none)'}")
        print(f"  Date:    {self.document_version}")
        print(f"  Output:  {self.output_dir}")
        for doc_type, formats in sorted(self.conversions.items()):
            print(f"  Type:    {doc_type} → {', '.join(sorted(formats))}")


def _validate_conversions(conversions):
    if not isinstance(conversions, dict):
        raise ConfigError("conversions must map document types to format lists")

    table = {}
    for doc_type, formats in conversions.items():
        if isinstance(formats, str):
            formats = [formats]
        elif formats is None:
            formats = []
        elif not isinstance(formats, (list, tuple)):
            raise ConfigError(
                f"conversions.{doc_type}: expected a list of formats, got {type(formats).__name__}"
            )
        unknown = [f for f in formats if f not in KNOWN_FORMATS]
        if unknown:
            raise ConfigError(
                f"conversions.{doc_type}: unknown format(s) {', '.join(map(str, unknown))} "
                f"(expected {', '.join(KNOWN_FORMATS)})"
            )
        # PDFs are rendered from the generated HTML pages
        if "pdf" in formats and "html" not in formats:
            raise ConfigError(f"conversions.{doc_type}: pdf requires html")
        table[str(doc_type)] = frozenset(formats or [])
    return table


def _parse_date(value):
    if value is None or value == "":
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"document_date must be YYYY-MM-DD, got '{value}'")


def _abspath(root, path):
    return os.path.normpath(os.path.join(root, os.path.expanduser(str(path))))
