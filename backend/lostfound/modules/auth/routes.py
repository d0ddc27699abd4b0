from flask import current_app, jsonify, request

from ...errors import AuthenticationError
from ...schemas.user import LoginSchema, SignupSchema
from ...security import issue_token, require_caller
from ..users import service as users
from . import bp


@bp.post("/signup")
def signup():
    schema = SignupSchema(
        student_id_pattern=current_app.config["STUDENT_ID_PATTERN"],
        email_domain=current_app.config.get("STUDENT_EMAIL_DOMAIN") or None,
    )
    data = schema.load(request.get_json(silent=True) or {})
    user = users.create_student(
        first_name=data["first_name"].strip(),
        last_name=data["last_name"].strip(),
        student_id=data["student_id"].strip(),
        email=data["email"],
        password=data["password"],
    )
    return jsonify({"message": "Account created successfully", "userId": user.id}), 201


@bp.post("/login")
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = users.authenticate(data["student_id"].strip(), data["password"])
    if user is None:
        raise AuthenticationError("Invalid student ID or password")
    token = issue_token(int(user.id))
    return jsonify({"message": "Login successful", "token": token, "user": users.user_to_dict(user)})


@bp.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy
    return jsonify({"message": "Logout successful"})


@bp.get("/user")
def current_user():
    caller = require_caller()
    return jsonify(users.user_to_dict(users.get_user(caller.id)))
