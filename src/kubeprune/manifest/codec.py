#!/usr/bin/env python3
"""
KUBEPRUNE MANIFEST CODEC - High-Fidelity Round-Trip
---------------------------------------------------
Reads and writes (multi-document) YAML manifests with ruamel.yaml in
round-trip mode, so comments and key order survive a clean pass.

Secrets are normalized to wire form on load and can be written out in
edit form (printable values decoded) on dump.

Author: KubePrune Team
"""

import io
from typing import Any, List

from ruamel.yaml import YAML, YAMLError

from kubeprune.core.errors import ManifestParseError
from kubeprune.secrets.transcoder import is_secret, to_edit_form, to_wire_form


class ManifestCodec:
    """
    Converts manifest text to CommentedMaps and back.
    """

    def __init__(self, decode_secrets: bool = False):
        self.decode_secrets = decode_secrets
        # YAML 1.2 resolution, no %YAML directive on output.
        self.yaml = YAML(typ="rt")
        self.yaml.preserve_quotes = True
        # kubectl style: sequences are not indented under their parent key.
        self.yaml.indent(mapping=2, sequence=2, offset=0)
        # Wide enough that long strings are never folded.
        self.yaml.width = 4096

    def load(self, text: str) -> List[Any]:
        """Parses every non-empty document of `text`."""
        try:
            docs = [doc for doc in self.yaml.load_all(text) if doc is not None]
        except YAMLError as e:
            mark = getattr(e, "problem_mark", None) or getattr(e, "context_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise ManifestParseError(str(e), line=line) from e

        return [to_wire_form(doc) if is_secret(doc) else doc for doc in docs]

    def dump(self, docs: List[Any]) -> str:
        """Serializes documents with explicit separators between them."""
        stream = io.StringIO()
        for i, doc in enumerate(docs):
            if self.decode_secrets and is_secret(doc):
                doc = to_edit_form(doc)
            if i > 0:
                stream.write("---\n")
            self.yaml.dump(doc, stream)
        return stream.getvalue()
