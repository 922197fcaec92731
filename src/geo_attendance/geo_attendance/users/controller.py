from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.guards import current_user, make_guards
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .serializers import user_to_dict


def register(app: Flask, container: Container) -> None:
    auth_required, admin_required = make_guards(container.auth_service)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        if not data.get("username") or not data.get("password"):
            raise ValidationError("Username and password required")

        result = container.auth_service.authenticate(data["username"], data["password"])
        return jsonify({"token": result.token, "user": user_to_dict(result.user)})

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    @admin_required
    def register_user():
        data = request.get_json(silent=True) or {}
        try:
            role = Role(data.get("role") or Role.USER.value)
        except ValueError:
            raise ValidationError("Role must be 'admin' or 'user'")

        user = container.user_service.register(
            current_role=current_user().role,
            username=data.get("username"),
            password=data.get("password"),
            name=data.get("name"),
            email=data.get("email"),
            role=role,
        )
        return jsonify({"message": "User created successfully", "user": user_to_dict(user)}), 201

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @auth_required
    def me():
        return jsonify(user_to_dict(container.user_service.get_profile(current_user().user_id)))

    @app.route("/api/auth/request-otp", methods=["POST"], endpoint="request_otp")
    def request_otp():
        data = request.get_json(silent=True) or {}
        container.password_reset_service.request_otp(data.get("email"))
        return jsonify({"message": "OTP sent to your email."})

    @app.route("/api/auth/verify-otp", methods=["POST"], endpoint="verify_otp")
    def verify_otp():
        data = request.get_json(silent=True) or {}
        container.password_reset_service.verify_otp(data.get("email"), data.get("otp"))
        return jsonify({"success": True})

    @app.route("/api/auth/reset-password", methods=["POST"], endpoint="reset_password")
    def reset_password():
        data = request.get_json(silent=True) or {}
        container.password_reset_service.reset_password(
            data.get("email"),
            data.get("otp"),
            data.get("newPassword"),
        )
        return jsonify({"message": "Password reset successful"})
