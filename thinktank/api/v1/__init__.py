"""
API v1 routes.
"""

from fastapi import APIRouter

from thinktank.api.v1 import (
    about,
    admin,
    contact,
    events,
    home,
    memberships,
    policies,
    profile,
    publications,
    search,
    taxonomy,
    uploads,
)

router = APIRouter()

router.include_router(profile.router, prefix="/profile", tags=["Profile"])
router.include_router(home.router, prefix="/home", tags=["Home"])
router.include_router(publications.router, prefix="/publications", tags=["Publications"])
router.include_router(policies.router, prefix="/policies", tags=["Policies"])
router.include_router(events.router, prefix="/events", tags=["Events"])
router.include_router(about.router, prefix="/about", tags=["About"])
router.include_router(taxonomy.router, tags=["Taxonomy"])
router.include_router(search.router, prefix="/search", tags=["Search"])
router.include_router(contact.router, prefix="/contact", tags=["Contact"])
router.include_router(memberships.router, prefix="/memberships", tags=["Memberships"])
router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
