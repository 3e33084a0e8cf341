from __future__ import annotations

from flask import Flask

from ..common.http import api_view, current_user_id, fail, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @api_view
    def classes_list():
        classes = container.class_service.list_classes(current_user_id())
        return ok([c.to_dict() for c in classes])

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @api_view
    def classes_create():
        data = json_body()
        created = container.class_service.create_class(
            name=data.get("name", ""),
            description=data.get("description", ""),
            schedule=data.get("schedule", ""),
            user_id=current_user_id(),
        )
        return ok(created.to_dict(), 201)

    @app.route("/api/classes/<class_id>", methods=["GET"], endpoint="classes_get")
    @api_view
    def classes_get(class_id: str):
        found = container.class_service.get_class(class_id)
        if not found:
            return fail("Class not found", 404)
        return ok(found.to_dict())

    @app.route("/api/classes/<class_id>", methods=["PUT"], endpoint="classes_update")
    @api_view
    def classes_update(class_id: str):
        updated = container.class_service.update_class(class_id, json_body())
        return ok(updated.to_dict())

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="classes_delete")
    @api_view
    def classes_delete(class_id: str):
        if not container.class_service.delete_class(class_id):
            return fail("Class not found", 404)
        return ok({"id": class_id})

    @app.route("/api/classes/<class_id>/standardize", methods=["POST"], endpoint="classes_standardize")
    @api_view
    def classes_standardize(class_id: str):
        students = container.roster_standardizer.replace_roster(class_id)
        return ok([s.to_dict() for s in students])

    @app.route("/api/classes/standardize", methods=["POST"], endpoint="classes_standardize_all")
    @api_view
    def classes_standardize_all():
        if not container.roster_standardizer.standardize_all_classes():
            return fail("Failed to standardize students", 502)
        return ok({"standardized": True})
