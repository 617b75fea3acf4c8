"""
Per-run build state shared by the pipeline stages.

Built fresh for every run: staging fills in the document types, the
generators record what they produced and which commands failed.
"""


class BuildContext:
    def __init__(self, config, verbose=False):
        self.config = config
        self.verbose = verbose
        self.doc_types = {}
        self.doc_type_names = set()
        self.outputs = {}
        self.failures = []

    def log(self, msg):
        if self.verbose:
            print(msg)

    # ── Document types ─────────────────────────────────────

    def register_doc(self, base, doc_type):
        """Record which document type a staged file came from."""
        previous = self.doc_types.get(base)
        if previous is not None and previous != doc_type:
            print(f"  Warning: '{base}' found in both {previous}/ and {doc_type}/, using {doc_type}/")
        self.doc_types[base] = doc_type
        self.doc_type_names.add(doc_type)

    def doc_type(self, base):
        return self.doc_types.get(base)

    def wants(self, base, fmt):
        """True if the document's type is in the conversions table and requests fmt."""
        doc_type = self.doc_types.get(base)
        if doc_type is None:
            return False
        return fmt in self.config.formats_for(doc_type)

    # ── Results ────────────────────────────────────────────

    def record_output(self, fmt, path):
        self.outputs.setdefault(fmt, []).append(path)

    def record_failure(self, result):
        self.failures.append(result)

    @property
    def ok(self):
        return not self.failures
