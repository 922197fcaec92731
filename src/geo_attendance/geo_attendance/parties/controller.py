from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.guards import current_user, make_guards
from ..container import Container
from .serializers import party_to_dict


def register(app: Flask, container: Container) -> None:
    auth_required, admin_required = make_guards(container.auth_service)

    @app.route("/api/party", methods=["GET"], endpoint="party_list")
    @auth_required
    def party_list():
        return jsonify([party_to_dict(p) for p in container.party_service.list_active()])

    @app.route("/api/party/all", methods=["GET"], endpoint="party_list_all")
    @admin_required
    def party_list_all():
        parties = container.party_service.list_all(current_role=current_user().role)
        return jsonify([party_to_dict(p) for p in parties])

    @app.route("/api/party", methods=["POST"], endpoint="party_create")
    @admin_required
    def party_create():
        data = request.get_json(silent=True) or {}
        caller = current_user()
        party = container.party_service.create(
            current_role=caller.role,
            created_by=caller.user_id,
            name=data.get("name"),
            description=data.get("description"),
        )
        return jsonify(party_to_dict(party)), 201

    @app.route("/api/party/<int:party_id>", methods=["PUT"], endpoint="party_update")
    @admin_required
    def party_update(party_id: int):
        data = request.get_json(silent=True) or {}
        party = container.party_service.update(
            current_role=current_user().role,
            party_id=party_id,
            name=data.get("name"),
            description=data.get("description"),
            is_active=data.get("isActive"),
        )
        return jsonify(party_to_dict(party))

    @app.route("/api/party/<int:party_id>", methods=["DELETE"], endpoint="party_delete")
    @admin_required
    def party_delete(party_id: int):
        container.party_service.delete(current_role=current_user().role, party_id=party_id)
        return jsonify({"message": "Party deleted successfully"})
