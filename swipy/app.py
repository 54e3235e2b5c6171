from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_self, require_user
from .auth.models import (
    LoginRequest,
    PushTokenUpdate,
    RegisterRequest,
    StatusQuery,
    StatusUpdate,
    UserOut,
    UserStatus,
)
from .auth.users import (
    authenticate,
    get_statuses,
    register_user,
    session_identity,
    set_push_token,
    update_status,
)
from .chat.models import ChatMessage, ChatMessageCreate
from .chat.service import conversation, post_message, recent_messages
from .config import DEFAULT_APP_CONFIG, AppConfig
from .errors import register_error_handlers
from .notifications.models import (
    InvitationTestRequest,
    MatchTestRequest,
    MessageTestRequest,
    Notification,
    SentNotificationResponse,
)
from .notifications.push import ExpoPushClient
from .notifications.service import (
    clear_notifications,
    delete_notification,
    get_notification,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
    notify_invitation,
    notify_match,
    notify_message,
)
from .reservations.models import Reservation, ReservationCreate
from .reservations.service import create_reservation, list_reservations
from .restaurants.discovery import discover_restaurants, parse_criteria
from .restaurants.models import Restaurant, RestaurantCreate
from .restaurants.service import create_restaurant, get_restaurant
from .seed import seed_restaurants
from .storage.base import DocumentStore
from .storage.factory import build_store
from .subscriptions import SubscribeRequest, subscribe

logger = logging.getLogger(__name__)


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_push_client(request: Request) -> ExpoPushClient:
    return request.app.state.push_client


router = APIRouter()


# ── Public endpoints ─────────────────────────────────────────────────────


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/subscribe")
def subscribe_email(body: SubscribeRequest, store: DocumentStore = Depends(get_store)) -> dict:
    subscribe(store, body.email)
    return {"message": "Thanks for subscribing! We'll be in touch soon."}


# ── User endpoints ───────────────────────────────────────────────────────


@router.post("/api/users/register", response_model=UserOut, status_code=201)
def register(body: RegisterRequest, store: DocumentStore = Depends(get_store)) -> Any:
    return register_user(store, body.name, body.username, body.password)


@router.post("/api/users/login", response_model=UserOut)
def login(body: LoginRequest, request: Request, store: DocumentStore = Depends(get_store)) -> Any:
    user = authenticate(store, body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = session_identity(user)
    return user


@router.post("/api/users/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@router.get("/api/users/me")
def users_me(user: dict = Depends(require_user)) -> dict:
    return user


@router.put("/api/users/{user_id}/status")
def set_status(user_id: str, body: StatusUpdate, store: DocumentStore = Depends(get_store)) -> dict:
    update_status(store, user_id, body.is_online)
    return {"success": True}


@router.post("/api/users/status", response_model=list[UserStatus])
def users_status(body: StatusQuery, store: DocumentStore = Depends(get_store)) -> Any:
    return [
        UserStatus(
            userId=u["_id"],
            isOnline=u.get("isOnline", False),
            lastSeen=u.get("lastSeen"),
            lastSwipedAt=u.get("lastSwipedAt"),
        )
        for u in get_statuses(store, body.user_ids)
    ]


@router.put("/api/users/{user_id}/push-token")
def register_push_token(
    user_id: str,
    body: PushTokenUpdate,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    require_self(user, user_id)
    set_push_token(store, user_id, body.push_token)
    return {"success": True}


# ── Restaurant endpoints ─────────────────────────────────────────────────


@router.get("/api/restaurants", response_model=list[Restaurant])
def restaurants(request: Request, store: DocumentStore = Depends(get_store)) -> Any:
    criteria = parse_criteria(request.query_params)
    return discover_restaurants(store, criteria)


@router.post("/api/restaurants", response_model=Restaurant)
def add_restaurant(body: RestaurantCreate, store: DocumentStore = Depends(get_store)) -> Any:
    return create_restaurant(store, body)


@router.get("/api/restaurants/{restaurant_id}", response_model=Restaurant)
def restaurant_detail(restaurant_id: str, store: DocumentStore = Depends(get_store)) -> Any:
    return get_restaurant(store, restaurant_id)


# ── Reservation endpoints ────────────────────────────────────────────────


@router.post("/api/reservations", response_model=Reservation)
def reserve(body: ReservationCreate, store: DocumentStore = Depends(get_store)) -> Any:
    return create_reservation(store, body)


@router.get("/api/reservations/{user_id}", response_model=list[Reservation])
def reservations(user_id: str, store: DocumentStore = Depends(get_store)) -> Any:
    return list_reservations(store, user_id)


# ── Chat endpoints ───────────────────────────────────────────────────────


@router.get("/api/chat", response_model=list[ChatMessage])
def chat_recent(store: DocumentStore = Depends(get_store)) -> Any:
    return recent_messages(store)


@router.get("/api/chat/{user_id}/{recipient_id}", response_model=list[ChatMessage])
def chat_conversation(user_id: str, recipient_id: str, store: DocumentStore = Depends(get_store)) -> Any:
    return conversation(store, user_id, recipient_id)


@router.post("/api/chat", response_model=ChatMessage)
def chat_post(
    body: ChatMessageCreate,
    store: DocumentStore = Depends(get_store),
    push_client: ExpoPushClient = Depends(get_push_client),
) -> Any:
    return post_message(store, push_client, body)


# ── Notification endpoints ───────────────────────────────────────────────


@router.get("/api/notifications/user/{user_id}", response_model=list[Notification])
def notifications(
    user_id: str,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> Any:
    require_self(user, user_id)
    found = list_notifications(store, user_id)
    logger.info("Found %d notifications for user %s", len(found), user_id)
    return found


@router.put("/api/notifications/{notification_id}/read", response_model=Notification)
def notification_read(
    notification_id: str,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> Any:
    require_self(user, get_notification(store, notification_id)["recipientId"])
    return mark_as_read(store, notification_id)


@router.put("/api/notifications/user/{user_id}/read-all")
def notifications_read_all(
    user_id: str,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    require_self(user, user_id)
    modified = mark_all_as_read(store, user_id)
    return {"message": "All notifications marked as read", "modifiedCount": modified}


@router.delete("/api/notifications/{notification_id}")
def notification_delete(
    notification_id: str,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    require_self(user, get_notification(store, notification_id)["recipientId"])
    delete_notification(store, notification_id)
    return {"message": "Notification deleted successfully"}


@router.delete("/api/notifications/user/{user_id}/clear-all")
def notifications_clear_all(
    user_id: str,
    user: dict = Depends(require_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    require_self(user, user_id)
    deleted = clear_notifications(store, user_id)
    return {"message": "All notifications cleared successfully", "deletedCount": deleted}


# ── Notification test endpoints ──────────────────────────────────────────


@router.post("/api/notifications/test/match", response_model=SentNotificationResponse)
def send_test_match(
    body: MatchTestRequest,
    store: DocumentStore = Depends(get_store),
    push_client: ExpoPushClient = Depends(get_push_client),
) -> Any:
    notification = notify_match(
        store, push_client, body.user_id, body.friend_id, body.restaurant_id, body.restaurant_name,
    )
    return {"message": "Test match notification sent", "notification": notification}


@router.post("/api/notifications/test/message", response_model=SentNotificationResponse)
def send_test_message(
    body: MessageTestRequest,
    store: DocumentStore = Depends(get_store),
    push_client: ExpoPushClient = Depends(get_push_client),
) -> Any:
    notification = notify_message(store, push_client, body.user_id, body.friend_id, body.message)
    return {"message": "Test message notification sent", "notification": notification}


@router.post("/api/notifications/test/invitation", response_model=SentNotificationResponse)
def send_test_invitation(
    body: InvitationTestRequest,
    store: DocumentStore = Depends(get_store),
    push_client: ExpoPushClient = Depends(get_push_client),
) -> Any:
    notification = notify_invitation(store, push_client, body.user_id, body.friend_id, body.restaurant_id)
    return {"message": "Test invitation notification sent", "notification": notification}


# ── Application factory ──────────────────────────────────────────────────


def create_app(
    config: AppConfig = DEFAULT_APP_CONFIG,
    store: DocumentStore | None = None,
    push_client: ExpoPushClient | None = None,
) -> FastAPI:
    """Build the API with an explicitly injected store and push client."""
    logging.basicConfig(level=config.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
        if config.seed_demo_data:
            seed_restaurants(app.state.store)
        yield
        logger.info("Shutting down the application.")
        app.state.push_client.close()
        app.state.store.close()

    app = FastAPI(title="Swipy API", version="1.0.0", lifespan=lifespan)
    app.state.store = store if store is not None else build_store()
    app.state.push_client = push_client if push_client is not None else ExpoPushClient()

    app.add_middleware(SessionMiddleware, secret_key=config.session_secret)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()
