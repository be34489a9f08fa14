#!/usr/bin/env python3
"""
KUBEPRUNE ENGINE - The Orchestrator
-----------------------------------
Builds the Registry once from a cluster (or snapshot) source, then runs the
load -> prune -> dump cycle over manifests. A document that cannot be
cleaned (unknown kind, missing schema) is reported and passed through
unchanged; the other documents of the same file are still cleaned.

Author: KubePrune Team
"""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from kubeprune.cluster.discovery import discover_all_groups
from kubeprune.cluster.openapi import load_definitions
from kubeprune.core.errors import KubePruneError
from kubeprune.manifest.codec import ManifestCodec
from kubeprune.pruning.pruner import clean_object, deep_equal
from kubeprune.registry.registry import Registry


def build_registry(source: Any, logger: Optional[logging.Logger] = None) -> Registry:
    """
    Runs discovery and loads the OpenAPI definitions from `source`
    (anything with get_json(path)), then attaches them.
    """
    definitions = load_definitions(source.get_json)
    groups = discover_all_groups(source.get_json)
    return Registry.attach(definitions, groups, logger=logger)


@dataclass
class DocumentReport:
    index: int
    api_version: str = "Unknown"
    kind: str = "Unknown"
    name: str = ""
    status: str = "UNCHANGED"       # CLEANED | UNCHANGED | SKIPPED
    error: Optional[str] = None


@dataclass
class CleanReport:
    content: str
    original: str = ""
    documents: List[DocumentReport] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(d.error is None for d in self.documents)

    @property
    def modified(self) -> bool:
        return any(d.status == "CLEANED" for d in self.documents)


class CleanEngine:
    """
    Principal orchestrator for manifest cleaning.
    """

    def __init__(self, registry: Registry, decode_secrets: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.codec = ManifestCodec(decode_secrets=decode_secrets)
        self.logger = logger if logger is not None else logging.getLogger("kubeprune.engine")

    @classmethod
    def from_source(cls, source: Any, decode_secrets: bool = False) -> "CleanEngine":
        return cls(build_registry(source), decode_secrets=decode_secrets)

    def clean_documents(self, docs: List[Any]) -> List[DocumentReport]:
        reports = []
        for index, doc in enumerate(docs):
            report = DocumentReport(index=index)
            if isinstance(doc, dict):
                report.api_version = str(doc.get("apiVersion", "Unknown"))
                report.kind = str(doc.get("kind", "Unknown"))
                metadata = doc.get("metadata")
                if isinstance(metadata, dict):
                    report.name = str(metadata.get("name", ""))

            original = copy.deepcopy(doc)
            try:
                clean_object(doc, self.registry, logger=self.logger)
            except KubePruneError as e:
                self.logger.warning("Document %d (%s %s): %s", index, report.api_version, report.kind, e)
                report.status = "SKIPPED"
                report.error = str(e)
            else:
                report.status = "UNCHANGED" if deep_equal(original, doc) else "CLEANED"
            reports.append(report)
        return reports

    def clean_text(self, text: str) -> CleanReport:
        docs = self.codec.load(text)
        reports = self.clean_documents(docs)
        return CleanReport(content=self.codec.dump(docs), original=text, documents=reports)

    def clean_file(self, path: Path, in_place: bool = False) -> CleanReport:
        report = self.clean_text(path.read_text(encoding="utf-8-sig"))
        if in_place and report.modified:
            self._atomic_write(path, report.content)
            self.logger.info("Rewrote %s", path)
        return report

    def _atomic_write(self, target_path: Path, content: str):
        temp_file = target_path.with_suffix(target_path.suffix + ".kubeprune.tmp")
        try:
            temp_file.write_text(content, encoding="utf-8")
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise KubePruneError(f"Atomic write to {target_path} failed: {e}") from e
