# scripts/audit_catalog.py
"""
Read-only drift audit: reconciled collection count plus a batch verification
of every metadata record. Nothing is repaired.

    python scripts/audit_catalog.py [--json]
"""
import argparse
import json
import sys

from loguru import logger

from photo_catalog.config import get_settings
from photo_catalog.db import SessionLocal
from photo_catalog.dependencies import get_blob_store
from photo_catalog.logging import init_logging
from photo_catalog.services.storage.metadata import SqlMetadataStore
from photo_catalog.services.verification.audit import audit_collection


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Audit metadata/blob drift")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    args = parser.parse_args(argv)

    settings = get_settings()
    init_logging(settings.log_level, settings.log_dir)
    blobs = get_blob_store(settings)
    db = SessionLocal()
    try:
        report = audit_collection(
            SqlMetadataStore(db),
            blobs,
            chunk_size=settings.batch_verify_limit,
            workers=settings.verify_workers,
        )
    finally:
        db.close()

    if args.json:
        print(json.dumps(report.model_dump(by_alias=True, mode="json"), ensure_ascii=False, indent=2))
    else:
        c = report.count
        print(f"photos: {c.reconciled_count} (blob {c.blob_derived_count}, db {c.metadata_count})")
        print(f"records checked: {report.checked}, drifting: {len(report.drifting)}")
        for r in report.drifting:
            detail = r.reason or ", ".join(r.missing_files) or "; ".join(r.errors)
            print(f"  {r.id}: {detail}")
    logger.info(f"audit finished: {len(report.drifting)} drifting records")
    return 1 if report.drifting else 0


if __name__ == "__main__":
    sys.exit(main())
