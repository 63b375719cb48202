"""Request-scoped access to the components built by ``create_app``"""

from datetime import datetime

from fastapi import Request

from ..services.mode_controller import ModeController
from ..services.proxy_handler import ProxyHandler
from ..services.statistics import ProxyStatistics, RequestHistory
from ..storage.repository import InteractionRepository


def get_repository(request: Request) -> InteractionRepository:
    return request.app.state.repository


def get_mode_controller(request: Request) -> ModeController:
    return request.app.state.mode_controller


def get_statistics(request: Request) -> ProxyStatistics:
    return request.app.state.statistics


def get_history(request: Request) -> RequestHistory:
    return request.app.state.history


def get_proxy_handler(request: Request) -> ProxyHandler:
    return request.app.state.proxy_handler


def get_started_at(request: Request) -> datetime:
    return request.app.state.started_at
