"""Import/Export Routes — verifies CSV import row handling and CSV/JSON export."""

import json


BOOKS_CSV = """ISBN,Title,Author,CategoryId,TotalCopies,AvailableCopies
9780000000001,Emma,Jane Austen,{category},2,2
9780000000002,,Jane Austen,{category},1,1
9780000000001,Emma Again,Jane Austen,{category},1,1
9780141439518,Duplicate,Jane Austen,{category},1,1
"""


async def _import(client, import_type, content, file_name="upload.csv"):
    return await client.post(
        "/api/v1/import-export/import",
        json={"importType": import_type, "fileName": file_name, "content": content},
    )


async def test_book_import_reports_each_bad_row(client, book):
    res = await _import(client, "books", BOOKS_CSV.format(category=book.category_id))
    assert res.status_code == 201
    job = res.json()
    assert job["status"] == "CompletedWithErrors"
    assert job["totalRecords"] == 4
    assert job["processedRecords"] == 4
    assert job["successRecords"] == 1
    assert job["failedRecords"] == 3
    assert job["errors"] == [
        "Row 3: 'Title' is required.",
        "Row 4: Duplicate ISBN '9780000000001' in file.",
        "Row 5: ISBN '9780141439518' already exists.",
    ]

    imported = (await client.get("/api/v1/books", params={"search": "9780000000001"})).json()
    assert [b["title"] for b in imported["items"]] == ["Emma"]


async def test_clean_category_import_completes(client):
    content = "Name,Description\nPoetry,Verse\nDrama,Plays\n"
    job = (await _import(client, "Categories", content)).json()
    assert job["status"] == "Completed"
    assert job["importType"] == "categories"
    assert job["successRecords"] == 2
    assert job["errors"] == []

    names = (await client.get("/api/v1/categories")).json()["items"]
    assert [c["name"] for c in names] == ["Drama", "Poetry"]


async def test_import_where_every_row_fails(client, member):
    content = (
        "MembershipNumber,FirstName,LastName,Email,MembershipStartDate,MembershipEndDate\n"
        f"{member.membership_number},Grace,Hopper,grace@example.org,2026-01-01,2026-12-31\n"
        "M-9,Alan,Turing,not-an-email,2026-01-01,2026-12-31\n"
    )
    job = (await _import(client, "members", content)).json()
    assert job["status"] == "Failed"
    assert job["errors"][0] == "Row 2: MembershipNumber 'M-0001' already exists."
    assert job["errors"][1].startswith("Row 3: ")
    assert "'Email'" in job["errors"][1]


async def test_import_is_audited_and_listed(client):
    job = (await _import(client, "categories", "Name\nPoetry\n")).json()
    trail = (await client.get(f"/api/v1/audit/entity/ImportJob/{job['id']}")).json()
    assert [e["action"] for e in trail] == ["Import"]

    jobs = (await client.get("/api/v1/import-export/import/jobs")).json()
    assert [j["id"] for j in jobs["items"]] == [job["id"]]
    fetched = await client.get(f"/api/v1/import-export/import/jobs/{job['id']}")
    assert fetched.json()["fileName"] == "upload.csv"


async def test_import_rejects_unknown_type(client):
    res = await _import(client, "loans", "Name\nx\n")
    assert res.status_code == 400
    assert "ImportType" in res.json()["errors"]


async def test_export_books_csv(client, book):
    res = await client.post(
        "/api/v1/import-export/export", json={"exportType": "books", "format": "csv"},
    )
    assert res.status_code == 200
    job = res.json()
    assert job["status"] == "Completed"
    assert job["totalRecords"] == 1
    assert job["fileName"].startswith("books_") and job["fileName"].endswith(".csv")
    lines = job["content"].splitlines()
    assert lines[0].split(",")[:3] == ["id", "isbn", "title"]
    assert "9780141439518" in lines[1]


async def test_export_members_json_with_filter(client, make_member):
    await make_member("M-1")
    await make_member("M-2", status="Suspended")
    res = await client.post(
        "/api/v1/import-export/export",
        json={"exportType": "members", "format": "json", "filters": {"Status": "Suspended"}},
    )
    rows = json.loads(res.json()["content"])
    assert [r["membership_number"] for r in rows] == ["M-2"]

    jobs = (await client.get("/api/v1/import-export/export/jobs")).json()
    assert jobs["totalCount"] == 1
    job_id = jobs["items"][0]["id"]
    fetched = (await client.get(f"/api/v1/import-export/export/jobs/{job_id}")).json()
    assert fetched["format"] == "json"


async def test_export_unknown_filter(client):
    res = await client.post(
        "/api/v1/import-export/export",
        json={"exportType": "fines", "filters": {"colour": "red"}},
    )
    assert res.status_code == 400
    assert res.json()["errors"]["Filters"] == ["Unknown filter 'colour'."]


async def test_unknown_job_is_404(client):
    assert (await client.get("/api/v1/import-export/import/jobs/5")).status_code == 404
    assert (await client.get("/api/v1/import-export/export/jobs/5")).status_code == 404
