"""
Async client for the PT Coach API.

Holds the caller's session (set on login, cleared on logout), retries a failed
call at most once, and reports failures as ``ApiError`` whose ``message`` is a
fixed user-facing sentence chosen by error kind.
"""
import logging
from typing import Any, List, Optional

import httpx
from jose import jwt, JWTError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.core.errors import AppError, ErrorKind, kind_for_status, user_message
from app.core.session import SessionContext
from app.schemas.admin import AdminTrainerOverview, PlatformStats, TrainerDetails
from app.schemas.auth import AuthResponse
from app.schemas.booking import AppointmentRequest, BookingOut, BookingUpdate
from app.schemas.client import ClientInfo, ClientProfile
from app.schemas.profile import UserProfile
from app.schemas.progress import (
    BodyWeightEntryOut,
    ExercisePerformanceIn,
    ExercisePerformanceOut,
    WorkoutProgressIn,
    WorkoutProgressOut,
)
from app.schemas.workout import (
    WorkoutDraft,
    WorkoutLogDraft,
    WorkoutLogResponse,
    WorkoutResponse,
    WorkoutUpdateDraft,
)
from app.services.workout_builder import workout_builder, workout_log_builder
from app.services.workout_runner import WorkoutRunner

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class ApiError(AppError):
    def __init__(self, kind: ErrorKind, detail: str = "", status_code: Optional[int] = None):
        super().__init__(detail, kind=kind)
        self.message = user_message(kind, detail)
        self.http_status = status_code

    def __str__(self) -> str:
        return self.message


class _TransientFailure(Exception):
    """A failure worth one more attempt: transport error or 5xx."""

    def __init__(self, response: Optional[httpx.Response] = None, reason: str = ""):
        super().__init__(reason or (f"HTTP {response.status_code}" if response is not None else ""))
        self.response = response


def error_from_response(response: httpx.Response) -> ApiError:
    kind = kind_for_status(response.status_code)
    detail = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        try:
            kind = ErrorKind(body.get("kind", kind))
        except ValueError:
            pass
        if isinstance(body.get("detail"), str):
            detail = body["detail"]
        elif body.get("detail"):
            detail = "Some fields are invalid"
    return ApiError(kind, detail, status_code=response.status_code)


class PTCoachClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
        retry_wait: float = 0.5,
    ):
        self.base_url = base_url
        self.retry_wait = retry_wait
        self.session: Optional[SessionContext] = None
        self.pt_code: Optional[int] = None
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._http: Optional[httpx.AsyncClient] = None
        if base_url:
            self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "PTCoachClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _send(self, method: str, path: str, headers: dict, **kwargs) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception_type(_TransientFailure),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                try:
                    response = await self._http.request(method, path, headers=headers, **kwargs)
                except httpx.TransportError as e:
                    logger.warning("%s %s failed: %s", method, path, e)
                    raise _TransientFailure(reason=str(e)) from e
                if response.status_code >= 500:
                    logger.warning("%s %s returned %s", method, path, response.status_code)
                    raise _TransientFailure(response)
                return response

    async def _request(self, method: str, path: str, auth: bool = True, **kwargs) -> Any:
        if self._http is None:
            raise ApiError(ErrorKind.service_unavailable, "Backend not available")
        headers = {}
        if auth:
            if self._access_token is None:
                raise ApiError(ErrorKind.unauthorized, "Not logged in")
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            response = await self._send(method, path, headers, **kwargs)
        except _TransientFailure as e:
            if e.response is not None:
                raise error_from_response(e.response) from e
            raise ApiError(ErrorKind.network, str(e)) from e

        if response.status_code >= 400:
            raise error_from_response(response)
        return response.json() if response.content else None

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def _start_session(self, data: dict) -> SessionContext:
        tokens = AuthResponse.model_validate(data)
        try:
            claims = jwt.get_unverified_claims(tokens.access_token)
            session = SessionContext.from_claims(claims)
        except (JWTError, KeyError, ValueError) as e:
            raise ApiError(ErrorKind.unknown, "Malformed access token") from e
        self._access_token = tokens.access_token
        self._refresh_token = tokens.refresh_token
        self.pt_code = tokens.pt_code
        self.session = session
        logger.info("Logged in as %s (%s)", session.username, session.auth_type.value)
        return session

    def _clear_session(self) -> None:
        self.session = None
        self.pt_code = None
        self._access_token = None
        self._refresh_token = None

    @property
    def is_logged_in(self) -> bool:
        return self.session is not None

    async def register_trainer(self, email: str, password: str) -> SessionContext:
        data = await self._request("POST", "/auth/trainer/register", auth=False,
                                   json={"email": email, "password": password})
        return self._start_session(data)

    async def login_trainer(self, email: str, password: str) -> SessionContext:
        data = await self._request("POST", "/auth/trainer/login", auth=False,
                                   json={"email": email, "password": password})
        return self._start_session(data)

    async def register_trainer_identity(self, first_name: str, last_name: str) -> TrainerDetails:
        data = await self._request("POST", "/auth/trainer/identity",
                                   json={"first_name": first_name, "last_name": last_name})
        return TrainerDetails.model_validate(data)

    async def register_client(
        self, username: str, code: str, trainer_code: int, email_or_nickname: Optional[str] = None
    ) -> SessionContext:
        data = await self._request("POST", "/auth/client/register", auth=False, json={
            "username": username,
            "code": code,
            "email_or_nickname": email_or_nickname,
            "trainer_code": trainer_code,
        })
        return self._start_session(data)

    async def login_client(self, username: str, code: str) -> SessionContext:
        data = await self._request("POST", "/auth/client/login", auth=False,
                                   json={"username": username, "code": code})
        return self._start_session(data)

    async def login_admin(self, access_code: str) -> SessionContext:
        data = await self._request("POST", "/auth/admin/login", auth=False,
                                   json={"access_code": access_code})
        return self._start_session(data)

    async def logout(self) -> None:
        """Forget the session; the server side is told on a best-effort basis."""
        if self._access_token is not None and self._http is not None:
            try:
                await self._request("POST", "/auth/logout")
            except ApiError as e:
                logger.info("Server-side logout failed: %s", e.kind.value)
        self._clear_session()

    async def get_caller_role(self) -> str:
        data = await self._request("GET", "/auth/role")
        return data["role"]

    async def refresh(self) -> SessionContext:
        if self._refresh_token is None:
            raise ApiError(ErrorKind.unauthorized, "No refresh token")
        data = await self._request("POST", "/auth/refresh", auth=False,
                                   json={"refresh_token": self._refresh_token})
        return self._start_session(data)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self) -> UserProfile:
        data = await self._request("GET", "/profile")
        return UserProfile.model_validate(data)

    async def save_profile(self, email_or_nickname: Optional[str]) -> UserProfile:
        data = await self._request("PUT", "/profile", json={"email_or_nickname": email_or_nickname})
        return UserProfile.model_validate(data)

    async def change_code(self, current_code: str, new_code: str) -> None:
        await self._request("PUT", "/profile/code",
                            json={"current_code": current_code, "new_code": new_code})

    async def get_pt_code(self) -> int:
        data = await self._request("GET", "/profile/pt-code")
        return data["pt_code"]

    # ------------------------------------------------------------------
    # Clients and workouts
    # ------------------------------------------------------------------

    async def get_clients(self) -> List[ClientProfile]:
        data = await self._request("GET", "/clients")
        return [ClientProfile.model_validate(item) for item in data]

    async def get_client_info(self, username: str) -> ClientInfo:
        data = await self._request("GET", f"/clients/{username}/info")
        return ClientInfo.model_validate(data)

    async def set_client_height(self, username: str, height: int) -> ClientInfo:
        data = await self._request("PUT", f"/clients/{username}/height", json={"height": height})
        return ClientInfo.model_validate(data)

    async def update_client_email(self, username: str, new_email: str) -> ClientProfile:
        data = await self._request("PUT", f"/clients/{username}/email", json={"new_email": new_email})
        return ClientProfile.model_validate(data)

    async def get_workouts(self, username: str) -> List[WorkoutResponse]:
        data = await self._request("GET", f"/workouts/clients/{username}")
        return [WorkoutResponse.model_validate(item) for item in data]

    async def submit_workout(self, username: str, draft: WorkoutDraft) -> WorkoutResponse:
        """Create a workout for ``username``; bad drafts never leave the process."""
        workout_builder.validate(draft)
        if self.session is not None and self.session.is_client:
            path = "/workouts/own"
        else:
            path = f"/workouts/clients/{username}"
        data = await self._request("POST", path, json=draft.model_dump())
        return WorkoutResponse.model_validate(data)

    async def update_workout(self, workout_id: int, draft: WorkoutUpdateDraft) -> WorkoutResponse:
        workout_builder.validate_exercises(draft.exercises)
        data = await self._request("PUT", f"/workouts/{workout_id}", json=draft.model_dump())
        return WorkoutResponse.model_validate(data)

    async def log_workout(self, workout: WorkoutResponse, draft: WorkoutLogDraft) -> WorkoutLogResponse:
        workout_log_builder.validate(workout.exercises, draft)
        data = await self._request("POST", f"/workouts/{workout.id}/logs", json=draft.model_dump())
        return WorkoutLogResponse.model_validate(data)

    async def get_workout_logs(self, username: str) -> List[WorkoutLogResponse]:
        data = await self._request("GET", f"/workouts/logs/{username}")
        return [WorkoutLogResponse.model_validate(item) for item in data]

    def run_workout(self, workout: WorkoutResponse) -> WorkoutRunner:
        return WorkoutRunner(workout.exercises)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    async def add_body_weight(self, username: str, weight: int, date: str) -> BodyWeightEntryOut:
        data = await self._request("POST", f"/progress/{username}/body-weight",
                                   json={"weight": weight, "date": date})
        return BodyWeightEntryOut.model_validate(data)

    async def get_body_weight_history(self, username: str) -> List[BodyWeightEntryOut]:
        data = await self._request("GET", f"/progress/{username}/body-weight")
        return [BodyWeightEntryOut.model_validate(item) for item in data]

    async def add_exercise_performance(
        self, username: str, entry: ExercisePerformanceIn
    ) -> ExercisePerformanceOut:
        data = await self._request("POST", f"/progress/{username}/performance", json=entry.model_dump())
        return ExercisePerformanceOut.model_validate(data)

    async def get_exercise_performance_history(self, username: str) -> List[ExercisePerformanceOut]:
        data = await self._request("GET", f"/progress/{username}/performance")
        return [ExercisePerformanceOut.model_validate(item) for item in data]

    async def add_workout_progress(self, username: str, entry: WorkoutProgressIn) -> WorkoutProgressOut:
        data = await self._request("POST", f"/progress/{username}/workouts", json=entry.model_dump())
        return WorkoutProgressOut.model_validate(data)

    async def get_client_progress(self, username: str) -> List[WorkoutProgressOut]:
        data = await self._request("GET", f"/progress/{username}/workouts")
        return [WorkoutProgressOut.model_validate(item) for item in data]

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def get_bookings(self, start: int, end: int) -> List[BookingOut]:
        data = await self._request("GET", "/bookings", params={"start": start, "end": end})
        return [BookingOut.model_validate(item) for item in data]

    async def create_booking(self, booking: BookingUpdate) -> int:
        data = await self._request("POST", "/bookings", json=booking.model_dump())
        return data["id"]

    async def update_booking(self, booking_id: int, booking: BookingUpdate) -> BookingOut:
        data = await self._request("PUT", f"/bookings/{booking_id}", json=booking.model_dump())
        return BookingOut.model_validate(data)

    async def delete_booking(self, booking_id: int) -> None:
        await self._request("DELETE", f"/bookings/{booking_id}")

    async def request_appointment(self, request: AppointmentRequest) -> int:
        data = await self._request("POST", "/bookings/appointments", json=request.model_dump())
        return data["id"]

    async def get_confirmed_appointments(self) -> List[BookingOut]:
        data = await self._request("GET", "/bookings/appointments/confirmed")
        return [BookingOut.model_validate(item) for item in data]

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def get_admin_overview(self) -> List[AdminTrainerOverview]:
        data = await self._request("GET", "/admin/overview")
        return [AdminTrainerOverview.model_validate(item) for item in data]

    async def get_all_trainers(self) -> List[TrainerDetails]:
        data = await self._request("GET", "/admin/trainers")
        return [TrainerDetails.model_validate(item) for item in data]

    async def get_platform_stats(self) -> PlatformStats:
        data = await self._request("GET", "/admin/stats")
        return PlatformStats.model_validate(data)
