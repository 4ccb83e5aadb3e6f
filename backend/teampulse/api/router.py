from fastapi import APIRouter

from teampulse.api.activities import activities_router
from teampulse.api.auth import auth_router
from teampulse.api.poker import poker_router
from teampulse.api.redemptions import redemptions_router
from teampulse.api.reports import reports_router
from teampulse.api.rewards import rewards_router
from teampulse.api.teams import teams_router
from teampulse.api.top_performers import top_performers_router
from teampulse.api.users import users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(activities_router)
api_router.include_router(teams_router)
api_router.include_router(rewards_router)
api_router.include_router(redemptions_router)
api_router.include_router(users_router)
api_router.include_router(top_performers_router)
api_router.include_router(poker_router)
api_router.include_router(reports_router)
