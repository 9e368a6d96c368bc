"""
FastAPI routers grouped by area (auth, calendar, tasks, users, sms).

Each module exposes APIRouter objects included by the app factory; handlers
reach the AppContext through the get_context dependency.
"""
