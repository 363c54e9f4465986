from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from opinion_reflow.framework import Artifact, register, with_metrics
from opinion_reflow.metadata import extract_metadata
from opinion_reflow.models import UNKNOWN_CASE


@dataclass(frozen=True)
class _MetadataExtractPass:
    """Recover case title, docket number and decided date."""

    name = "metadata_extract"
    input_type = dict
    output_type = dict

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not isinstance(doc, Mapping) or "page_results" not in doc:
            return a
        pages = doc.get("pages") or []
        first_runs = pages[0].runs if pages else ()
        metadata = extract_metadata(first_runs, doc.get("page_results") or [])
        meta = with_metrics(
            a.meta,
            self.name,
            title_found=metadata.case_title != UNKNOWN_CASE,
            docket_found=bool(metadata.docket_number),
            date_found=bool(metadata.decided_date),
        )
        return Artifact(payload={**doc, "metadata": metadata}, meta=meta)


metadata_extract = register(_MetadataExtractPass())
