#!/usr/bin/env python3
"""Demo seed script: DealDesk.

Seeds one deal team member, a SAFE term sheet document and two versions of it
so the comparison view has something to redline out of the box.

Usage:
    # From the repo root:
    cd apps/api && python ../../scripts/seed_demo.py
    cd apps/api && python ../../scripts/seed_demo.py --dry-run

Flags:
    --dry-run   Print what would be seeded without committing anything.
"""

from __future__ import annotations

import argparse
import os
import sys
import uuid

# Allow running from the repo root or from apps/api/
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "apps", "api"))

from dealdesk.core.config import settings
from dealdesk.models.core import User
from dealdesk.models.documents import Document, DocumentVersion
from dealdesk.models.enums import DocumentStatus, TimelineEventType
from dealdesk.models.timeline import TimelineEvent
from dealdesk.modules.doc_compare.normalize import detect_content_kind

# Import Base so all tables are registered before create_engine is called.
from dealdesk.core.database import Base  # noqa: F401

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session as SyncSession

# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------

DEMO_DEAL_ID = uuid.UUID("6f1c2b9e-4d3a-4e1f-9a55-0c7d2e8b1a01")

DEMO_USER = {
    "username": "jdoe",
    "full_name": "Jordan Doe",
    "initials": "JD",
    "email": "jordan.doe@example.com",
    "role": "Deal Counsel",
    "avatar_color": "#0F766E",
}

DEMO_DOCUMENT = {
    "title": "SAFE Term Sheet",
    "description": "Simple agreement for future equity, seed round",
    "category": "Financing",
    "status": DocumentStatus.IN_REVIEW,
}

SAFE_TERM_SHEET_V1 = """**SAFE Term Sheet**

Investor: Northwind Ventures
Purchase Amount: $500,000
Valuation Cap: $8,000,000
Discount Rate: 20%

*Pro Rata Rights.* The Investor will have the right to participate in the next equity financing.

*Information Rights.* The Company will deliver annual financial statements to the Investor.

Closing Conditions: execution of the SAFE and receipt of the Purchase Amount."""

SAFE_TERM_SHEET_V2 = """**SAFE Term Sheet**

Investor: Northwind Ventures
Purchase Amount: $750,000
Valuation Cap: $10,000,000
Discount Rate: 15%

*Pro Rata Rights.* The Investor will have the right to participate in the next equity financing.

*Information Rights.* The Company will deliver quarterly and annual financial statements to the Investor.

*Board Observer.* The Investor may appoint one non-voting observer to the Board of Directors.

Closing Conditions: execution of the SAFE and receipt of the Purchase Amount."""

DEMO_VERSIONS = [
    {
        "file_name": "safe-term-sheet-v1.txt",
        "file_content": SAFE_TERM_SHEET_V1,
        "comment": "Initial draft from company counsel",
    },
    {
        "file_name": "safe-term-sheet-v2.txt",
        "file_content": SAFE_TERM_SHEET_V2,
        "comment": "Investor markup: larger check, higher cap, board observer",
    },
]


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_user(session: SyncSession, dry_run: bool) -> User | None:
    existing = session.execute(
        select(User).where(User.username == DEMO_USER["username"])
    ).scalar_one_or_none()
    if existing:
        print(f"  [skip]    User '{existing.username}' already exists")
        return existing
    print(f"  [create]  User '{DEMO_USER['username']}' ({DEMO_USER['full_name']})")
    if dry_run:
        return None
    user = User(**DEMO_USER)
    session.add(user)
    session.flush()
    return user


def seed_document(session: SyncSession, assignee: User | None, dry_run: bool) -> Document | None:
    existing = session.execute(
        select(Document).where(
            Document.deal_id == DEMO_DEAL_ID,
            Document.title == DEMO_DOCUMENT["title"],
        )
    ).scalar_one_or_none()
    if existing:
        print(f"  [skip]    Document '{existing.title}' already exists")
        return existing
    print(f"  [create]  Document '{DEMO_DOCUMENT['title']}'")
    if dry_run:
        return None
    document = Document(
        deal_id=DEMO_DEAL_ID,
        assignee_id=assignee.id if assignee else None,
        **DEMO_DOCUMENT,
    )
    session.add(document)
    session.flush()
    return document


def seed_versions(
    session: SyncSession, document: Document | None, uploader: User | None, dry_run: bool
) -> int:
    if document is None or uploader is None:
        for number, data in enumerate(DEMO_VERSIONS, start=1):
            print(f"  [create]  Version v{number} '{data['file_name']}'")
        return len(DEMO_VERSIONS) if dry_run else 0

    latest = session.execute(
        select(func.max(DocumentVersion.version)).where(
            DocumentVersion.document_id == document.id
        )
    ).scalar_one_or_none() or 0

    created = 0
    for number, data in enumerate(DEMO_VERSIONS, start=1):
        if number <= latest:
            print(f"  [skip]    Version v{number} already exists")
            continue
        print(f"  [create]  Version v{number} '{data['file_name']}'")
        session.add(
            DocumentVersion(
                document_id=document.id,
                version=number,
                file_name=data["file_name"],
                file_size=len(data["file_content"].encode("utf-8")),
                file_type="text/plain",
                file_content=data["file_content"],
                content_kind=detect_content_kind(data["file_content"]),
                uploaded_by_id=uploader.id,
                comment=data["comment"],
            )
        )
        session.add(
            TimelineEvent(
                deal_id=document.deal_id,
                title="Document Updated",
                description=f"New version (v{number}) of {document.title} uploaded.",
                event_type=TimelineEventType.DOCUMENT,
                reference_id=document.id,
                reference_type="document",
            )
        )
        created += 1
    return created


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(description="DealDesk demo seed script")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be seeded without writing to the database",
    )
    args = parser.parse_args()

    dry_run: bool = args.dry_run

    if dry_run:
        print("=" * 60)
        print("DRY RUN: no changes will be committed")
        print("=" * 60)

    engine = create_engine(settings.DATABASE_URL_SYNC, echo=False)

    with SyncSession(engine) as session:
        print("\n--- Users ---")
        user = seed_user(session, dry_run)

        print("\n--- Documents ---")
        document = seed_document(session, user, dry_run)

        print("\n--- Document Versions ---")
        versions = seed_versions(session, document, user, dry_run)

        if not dry_run:
            session.commit()
            print(f"\n[OK] {versions} version(s) committed.")
        else:
            session.rollback()
            print("\n[DRY RUN] No changes committed.")


if __name__ == "__main__":
    main()
