from __future__ import annotations

from flask import Flask

from ..common.http import api_view, fail, json_body, ok
from ..container import Container
from ..core.ids import student_ref

# JSON (camelCase) -> service field names
_FIELDS = {"firstName": "first_name", "lastName": "last_name", "email": "email"}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/students", methods=["GET"], endpoint="students_list")
    @api_view
    def students_list(class_id: str):
        students = container.student_service.list_students(class_id)
        return ok([s.to_dict() for s in students])

    @app.route("/api/classes/<class_id>/students", methods=["POST"], endpoint="students_create")
    @api_view
    def students_create(class_id: str):
        data = json_body()
        student = container.student_service.create_student(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            class_id=class_id,
        )
        body = student.to_dict()
        body["local"] = student.ref.is_local
        return ok(body, 201)

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="students_get")
    @api_view
    def students_get(student_id: str):
        student = container.student_service.get_student(student_ref(student_id))
        if not student:
            return fail("Student not found", 404)
        return ok(student.to_dict())

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    @api_view
    def students_update(student_id: str):
        data = json_body()
        changes = {field: data[key] for key, field in _FIELDS.items() if key in data}
        updated = container.student_service.update_student(student_ref(student_id), changes)
        return ok(updated.to_dict())

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @api_view
    def students_delete(student_id: str):
        if not container.student_service.delete_student(student_ref(student_id)):
            return fail("Student not found", 404)
        return ok({"id": student_id})

    @app.route("/api/students/duplicates", methods=["GET"], endpoint="students_duplicates")
    @api_view
    def students_duplicates():
        groups = container.reconciler.local_duplicates()
        return ok([[s.to_dict() for s in group] for group in groups])
