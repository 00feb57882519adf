from fastapi import APIRouter
from hoprun.api.endpoints import auth, projects, connections, query

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(projects.router, tags=["projects"])
api_router.include_router(connections.router, tags=["connections"])
api_router.include_router(query.router, tags=["query"])
