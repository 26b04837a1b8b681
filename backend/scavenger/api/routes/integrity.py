"""Integrity Route: on-demand audit of cross-entity pointers."""

from fastapi import APIRouter, Depends

from scavenger.services.directories import Directories, get_directories

router = APIRouter(prefix="/api/v1/integrity", tags=["integrity"])


@router.get("")
async def integrity_report(dirs: Directories = Depends(get_directories)):
    violations = await dirs.audit()
    return {
        "ok": not violations,
        "violations": [v.to_dict() for v in violations],
    }
