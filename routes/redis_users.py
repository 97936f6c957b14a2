# routes/redis_users.py

from quart import Blueprint, current_app, jsonify, request, url_for

from logic.errors import InvalidRequestBody
from logic.user_records import UserRecordService
from middleware.error_handling import register_error_handlers, text_response

redis_users_bp = Blueprint("redis_users_bp", __name__)
register_error_handlers(redis_users_bp)


def get_user_service() -> UserRecordService:
    """Build the per-request service around the app's shared store."""
    config = current_app.config
    return UserRecordService(
        current_app.kv_store,
        key_prefix=config.get("USER_KEY_PREFIX", "User:"),
        list_pattern=config.get("USER_LIST_PATTERN", "*"),
        id_factory=current_app.user_id_factory,
    )


async def _json_object_body():
    data = await request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestBody()
    return data


@redis_users_bp.route("/allusers", methods=["GET"])
async def list_users():
    users = await get_user_service().list_users()
    return jsonify(users)


@redis_users_bp.route("/users/<user_id>", methods=["GET"])
async def get_user(user_id):
    user = await get_user_service().get_user(user_id)
    return jsonify(user)


@redis_users_bp.route("/createuser", methods=["POST"])
async def create_user():
    user = await _json_object_body()
    user_id = await get_user_service().create_user(user)
    return text_response(
        f"User {user_id} added successfully to the database",
        201,
        headers={"Location": url_for("redis_users_bp.get_user", user_id=user_id)},
    )


@redis_users_bp.route("/<name>", methods=["PUT"])
async def update_user(name):
    changes = await _json_object_body()
    await get_user_service().update_user(name, changes)
    return text_response("User updated successfully in the database")


@redis_users_bp.route("/users/<name>", methods=["DELETE"])
async def delete_user(name):
    await get_user_service().delete_user(name)
    return text_response("User deleted from database")
