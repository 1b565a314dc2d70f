from fastapi import APIRouter
from crea.api.v1.endpoints import (
    auth, users, events, circulars, manuals, court_cases, documents, forum, memberships, donations,
    notifications, settings, external_links, body_members, mutual_transfers, suggestions, stats,
    advertisements, achievements, breaking_news,
)

api_router = APIRouter()

# Accounts
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# Content
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(circulars.router, prefix="/circulars", tags=["Circulars"])
api_router.include_router(manuals.router, prefix="/manuals", tags=["Manuals"])
api_router.include_router(court_cases.router, prefix="/court-cases", tags=["Court Cases"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(forum.router, prefix="/forum", tags=["Forum"])

# Payments
api_router.include_router(memberships.router, prefix="/memberships", tags=["Memberships"])
api_router.include_router(donations.router, prefix="/donations", tags=["Donations"])

api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])

# Association directory
api_router.include_router(external_links.router, prefix="/external-links", tags=["External Links"])
api_router.include_router(body_members.router, prefix="/body-members", tags=["Body Members"])
api_router.include_router(mutual_transfers.router, prefix="/mutual-transfers", tags=["Mutual Transfers"])
api_router.include_router(suggestions.router, prefix="/suggestions", tags=["Suggestions"])
api_router.include_router(stats.router, prefix="/stats", tags=["Stats"])

# Home page
api_router.include_router(advertisements.router, prefix="/advertisements", tags=["Advertisements"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["Achievements"])
api_router.include_router(breaking_news.router, prefix="/breaking-news", tags=["Breaking News"])
