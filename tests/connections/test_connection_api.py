import pytest
from sqlalchemy.future import select

from src.app.common.utils.consts import ConnectionStatus
from src.app.v1.connection.entity.connection import Connection
from src.app.v1.user.entity.student_profile import StudentProfile
from src.app.v1.user.entity.teacher_profile import TeacherProfile


async def get_connection(session_factory, connection_id: str) -> Connection:
    async with session_factory() as session:
        result = await session.execute(select(Connection).where(Connection.id == connection_id))
        return result.scalar_one()


# 교사 초대 -> 학생 수락 시나리오
@pytest.mark.asyncio
async def test_invite_then_accept(client, session_factory, make_teacher, make_student, auth_header):
    teacher = await make_teacher()
    student = await make_student()

    response = await client.post(
        "/api/connections/invite", json={"studentId": student.external_id}, headers=auth_header(teacher)
    )
    assert response.status_code == 201
    invite = response.json()
    assert invite["status"] == "pending"
    assert invite["teacherId"] == teacher.external_id
    assert invite["studentId"] == student.external_id
    assert "createdAt" in invite

    response = await client.patch(
        f"/api/connections/invite/{invite['id']}/respond", json={"action": "accept"}, headers=auth_header(student)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    async with session_factory() as session:
        teacher_profile = (
            await session.execute(select(TeacherProfile).where(TeacherProfile.user_id == teacher.external_id))
        ).scalar_one()
        student_profile = (
            await session.execute(select(StudentProfile).where(StudentProfile.user_id == student.external_id))
        ).scalar_one()
    assert student.external_id in teacher_profile.connected_students
    assert teacher.external_id in student_profile.connected_teachers


@pytest.mark.asyncio
async def test_request_by_code(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher(code="ABC123")
    student = await make_student()

    response = await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(student))

    assert response.status_code == 201
    assert response.json()["teacherId"] == teacher.external_id
    assert response.json()["status"] == "pending"


@pytest.mark.asyncio
async def test_request_by_identity(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher(code=None)
    student = await make_student()

    response = await client.post(
        "/api/connections/request", json={"teacherId": teacher.external_id}, headers=auth_header(student)
    )

    assert response.status_code == 201
    assert response.json()["teacherId"] == teacher.external_id


@pytest.mark.asyncio
async def test_duplicate_request_conflicts(client, make_teacher, make_student, auth_header):
    await make_teacher(code="ABC123")
    student = await make_student()

    first = await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(student))
    second = await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(student))

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"message": "Request already exists"}


@pytest.mark.asyncio
async def test_duplicate_invite_conflicts(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher()
    student = await make_student()

    payload = {"studentId": student.external_id}
    await client.post("/api/connections/invite", json=payload, headers=auth_header(teacher))
    response = await client.post("/api/connections/invite", json=payload, headers=auth_header(teacher))

    assert response.status_code == 409
    assert response.json()["message"] == "Invite already exists"


@pytest.mark.asyncio
@pytest.mark.parametrize("teacher_id", ["NOPE42", "a" * 32])
async def test_request_unknown_teacher(client, make_student, auth_header, teacher_id):
    student = await make_student()

    response = await client.post(
        "/api/connections/request", json={"teacherId": teacher_id}, headers=auth_header(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_foreign_student_cannot_respond(client, session_factory, make_teacher, make_student, auth_header):
    teacher = await make_teacher()
    student = await make_student()
    intruder = await make_student(name="Alex Kim")

    invite = (
        await client.post(
            "/api/connections/invite", json={"studentId": student.external_id}, headers=auth_header(teacher)
        )
    ).json()

    response = await client.patch(
        f"/api/connections/invite/{invite['id']}/respond", json={"action": "accept"}, headers=auth_header(intruder)
    )

    assert response.status_code == 403
    assert (await get_connection(session_factory, invite["id"])).status == ConnectionStatus.PENDING


@pytest.mark.asyncio
async def test_second_response_is_rejected(client, session_factory, make_teacher, make_student, auth_header):
    teacher = await make_teacher(code="ABC123")
    student = await make_student()

    request = (
        await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(student))
    ).json()
    url = f"/api/connections/invite/{request['id']}/respond"

    first = await client.patch(url, json={"action": "accept"}, headers=auth_header(student))
    second = await client.patch(url, json={"action": "reject"}, headers=auth_header(student))

    assert first.status_code == 200
    assert second.status_code == 409
    assert (await get_connection(session_factory, request["id"])).status == ConnectionStatus.ACCEPTED

    # 두 번째 응답은 프로필을 다시 갱신하지 않는다
    async with session_factory() as session:
        teacher_profile = (
            await session.execute(select(TeacherProfile).where(TeacherProfile.user_id == teacher.external_id))
        ).scalar_one()
    assert teacher_profile.connected_students == [student.external_id]


@pytest.mark.asyncio
async def test_invalid_action(client, make_student, auth_header):
    student = await make_student()

    response = await client.patch(
        "/api/connections/invite/whatever/respond", json={"action": "maybe"}, headers=auth_header(student)
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid action"}


@pytest.mark.asyncio
async def test_respond_missing_invite(client, make_student, auth_header):
    student = await make_student()

    response = await client.patch(
        f"/api/connections/invite/{'b' * 32}/respond", json={"action": "accept"}, headers=auth_header(student)
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Invite not found"}


@pytest.mark.asyncio
async def test_validation_errors_are_400(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher()
    student = await make_student()

    empty = await client.post("/api/connections/invite", json={"studentId": ""}, headers=auth_header(teacher))
    missing = await client.post("/api/connections/request", json={}, headers=auth_header(student))
    wrong_type = await client.post("/api/connections/request", json={"teacherId": 42}, headers=auth_header(student))

    for response in (empty, missing, wrong_type):
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"]


@pytest.mark.asyncio
async def test_role_checks(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher(code="ABC123")
    student = await make_student()

    as_student = await client.post(
        "/api/connections/invite", json={"studentId": student.external_id}, headers=auth_header(student)
    )
    as_teacher = await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(teacher))

    assert as_student.status_code == 403
    assert as_teacher.status_code == 403


@pytest.mark.asyncio
async def test_list_connections_by_role(client, make_teacher, make_student, auth_header):
    teacher = await make_teacher(code="ABC123")
    student = await make_student()
    await client.post("/api/connections/request", json={"teacherId": "ABC123"}, headers=auth_header(student))

    teacher_view = await client.get("/api/connections", headers=auth_header(teacher))
    student_view = await client.get("/api/connections", headers=auth_header(student))

    assert teacher_view.status_code == 200
    assert [c["counterpart"]["id"] for c in teacher_view.json()] == [student.external_id]
    assert teacher_view.json()[0]["counterpart"]["name"] == "Sam Park"

    assert student_view.status_code == 200
    assert student_view.json()[0]["counterpart"] == {
        "id": teacher.external_id,
        "name": "Ms Johnson",
        "email": "msjohnson@example.com",
    }


@pytest.mark.asyncio
async def test_list_connections_empty(client, make_student, auth_header):
    student = await make_student()

    response = await client.get("/api/connections", headers=auth_header(student))

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_connections_require_token(client):
    response = await client.get("/api/connections")

    assert response.status_code == 401
    assert response.json() == {"message": "Access token is missing"}
