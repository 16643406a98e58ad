"""User, session and channel endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from vidtube.api.deps import (
    REFRESH_COOKIE,
    api_response,
    clear_token_cookies,
    current_access_token,
    current_user_id,
    discard_uploads,
    get_auth_service,
    get_channel_service,
    get_identity_service,
    require_auth,
    set_token_cookies,
    stage_upload,
    timing,
)
from vidtube.schemas import (
    AccountUpdateSchema,
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
    WatchHistoryItemSchema,
)
from vidtube.services.auth.dto import LoginIn, LogoutIn, RefreshIn
from vidtube.services.identity.dto import (
    AccountUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
)

bp = Blueprint("users", __name__, url_prefix="/users")

register_schema = RegisterSchema()
login_schema = LoginSchema()
login_response_schema = LoginResponseSchema()
refresh_schema = RefreshTokenSchema()
token_pair_schema = TokenPairSchema()
change_password_schema = ChangePasswordSchema()
account_update_schema = AccountUpdateSchema()
user_schema = UserSchema()
channel_profile_schema = ChannelProfileSchema()
watch_history_schema = WatchHistoryItemSchema(many=True)


# --------------------------------------------------------------------------- #
# Registration & session lifecycle
# --------------------------------------------------------------------------- #


@bp.post("/register")
@timing
def register():
    """Create an account from multipart fields plus avatar/cover files."""

    avatar_path = stage_upload("avatar")
    cover_path = stage_upload("coverImage")
    try:
        payload = register_schema.load(request.form)
        user = get_identity_service().register_user(
            UserRegisterIn(
                full_name=payload["full_name"],
                email=payload["email"],
                username=payload["username"],
                password=payload["password"],
                avatar_path=avatar_path,
                cover_image_path=cover_path,
            )
        )
    finally:
        # Files already pushed to the media host are gone; the rest is cleaned here
        discard_uploads(avatar_path, cover_path)
    return api_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate by username or email and set both token cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    response = api_response(login_response_schema.dump(result), "User logged in successfully")
    return set_token_cookies(
        response, access_token=result.access_token, refresh_token=result.refresh_token
    )


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Invalidate the refresh token and the access token used for this call."""

    jti, expires_at = current_access_token()
    get_auth_service().logout(
        LogoutIn(user_id=current_user_id(), access_jti=jti, access_expires_at=expires_at)
    )
    return clear_token_cookies(api_response({}, "User logged out"))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token presented in the body, else the cookie."""

    body = refresh_schema.load(request.get_json(silent=True) or {})
    presented = body["refresh_token"] or request.cookies.get(REFRESH_COOKIE)
    pair = get_auth_service().refresh(RefreshIn(refresh_token=presented))
    response = api_response(token_pair_schema.dump(pair), "Access token refreshed")
    return set_token_cookies(
        response, access_token=pair.access_token, refresh_token=pair.refresh_token
    )


# --------------------------------------------------------------------------- #
# Account
# --------------------------------------------------------------------------- #


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(request.get_json(silent=True) or {})
    get_identity_service().change_password(
        UserPasswordChangeIn(
            user_id=current_user_id(),
            old_password=data["old_password"],
            new_password=data["new_password"],
            confirm_password=data["confirm_password"],
        )
    )
    return api_response({}, "Password changed successfully")


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    user = get_identity_service().get_current_user(current_user_id())
    return api_response(user_schema.dump(user), "User fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    data = account_update_schema.load(request.get_json(silent=True) or {})
    user = get_identity_service().update_account_details(
        current_user_id(), AccountUpdateIn(full_name=data["full_name"], email=data["email"])
    )
    return api_response(user_schema.dump(user), "Account details updated successfully")


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    path = stage_upload("avatar")
    try:
        user = get_identity_service().update_avatar(current_user_id(), path)
    finally:
        discard_uploads(path)
    return api_response(user_schema.dump(user), "Avatar updated successfully")


@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    path = stage_upload("coverImage")
    try:
        user = get_identity_service().update_cover_image(current_user_id(), path)
    finally:
        discard_uploads(path)
    return api_response(user_schema.dump(user), "Cover image updated successfully")


# --------------------------------------------------------------------------- #
# Channel read models
# --------------------------------------------------------------------------- #


@bp.get("/c/<username>")
@require_auth
@timing
def channel_profile(username: str):
    profile = get_channel_service().get_channel_profile(username, viewer_id=current_user_id())
    return api_response(channel_profile_schema.dump(profile), "User channel fetched successfully")


@bp.get("/history")
@require_auth
@timing
def watch_history():
    items = get_channel_service().get_watch_history(current_user_id())
    return api_response(watch_history_schema.dump(items), "Watch history fetched successfully")
