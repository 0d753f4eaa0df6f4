"""Tests for the school list CSV import."""
import pytest
from audit_backend.models import db, Audit
from audit_backend.services.csv_import import (
    import_audits_from_csv, find_header_index, parse_school_row, CsvImportError
)

SCHOOL_LIST = """LAGOS STATE PUBLIC PRIMARY SCHOOLS,,,,
,,,,

S/N,Local government,Ward,School name,Address
1,Ikeja,Ward A,Ikeja Primary School,1 Allen Avenue
2,Surulere,Ward C,Surulere Model School,
Subtotal,,,,
3,Epe,Ward F,Epe Grammar
"""


@pytest.fixture
def school_csv(tmp_path):
    path = tmp_path / 'schools.csv'
    path.write_text(SCHOOL_LIST, encoding='utf-8')
    return path


def test_find_header_index():
    rows = [['Title'], ['S/N', 'Local government'], ['1', 'Ikeja']]
    assert find_header_index(rows) == 1
    assert find_header_index([['1', 'Ikeja']]) == -1


def test_parse_school_row():
    assert parse_school_row(['4', 'Badagry', 'W', ' Badagry School ', 'Seme Road']) == {
        'id': 4,
        'local_gov': 'Badagry',
        'school_name': 'Badagry School',
        'school_address': 'Seme Road',
    }
    assert parse_school_row(['5', 'Epe'])['school_name'] == ''
    assert parse_school_row(['Total', '', '', '', '']) is None
    assert parse_school_row([]) is None


def test_import_creates_audits(app, school_csv):
    with app.app_context():
        summary = import_audits_from_csv(str(school_csv))
        assert summary == {'created': 3, 'updated': 0, 'skipped': 1}

        audit = db.session.get(Audit, 1)
        assert audit.school_name == 'Ikeja Primary School'
        assert audit.local_gov == 'Ikeja'
        assert audit.school_address == '1 Allen Avenue'
        assert audit.photos == []
        assert audit.synced is True
        assert db.session.get(Audit, 3).school_address == ''


def test_import_updates_existing_audits(app, client, school_csv):
    client.post('/api/audits', json={
        'id': 2,
        'schoolName': 'Old name',
        'totalTeachers': 9,
        'photos': 'front.jpg',
    })

    with app.app_context():
        summary = import_audits_from_csv(str(school_csv))
        assert summary == {'created': 2, 'updated': 1, 'skipped': 1}

        audit = db.session.get(Audit, 2)
        assert audit.school_name == 'Surulere Model School'
        assert audit.total_teachers == 9
        assert audit.photos == [{'name': 'front.jpg', 'data': '', 'type': ''}]


def test_import_without_header(app, tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text('1,Ikeja,Ward A,School,Address\n', encoding='utf-8')
    with app.app_context():
        with pytest.raises(CsvImportError):
            import_audits_from_csv(str(path))


def test_import_csv_command(runner, app, school_csv):
    result = runner.invoke(args=['import-csv', str(school_csv)])
    assert result.exit_code == 0
    assert '3 created, 0 updated, 1 rows skipped' in result.output

    with app.app_context():
        assert db.session.get(Audit, 2).school_name == 'Surulere Model School'


def test_import_csv_command_without_header(runner, tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text('no header here\n', encoding='utf-8')
    result = runner.invoke(args=['import-csv', str(path)])
    assert result.exit_code != 0
    assert 'Could not find header row' in result.output


def test_init_db_command(runner):
    result = runner.invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Initialized the database' in result.output


def test_imported_long_names_are_listed(app, client, tmp_path):
    long_name = 'Government Technical College ' * 12
    path = tmp_path / 'long.csv'
    path.write_text(f'S/N,Local government,Ward,School name,Address\n1,Ikeja,Ward A,{long_name},Road\n', encoding='utf-8')

    with app.app_context():
        import_audits_from_csv(str(path))

    response = client.get('/api/audits')
    assert response.status_code == 200
    data = response.get_json()
    assert data[0]['schoolName'] == long_name.strip()
    assert len(data[0]['schoolName']) > 300


def test_imported_text_is_sanitized(app, tmp_path):
    path = tmp_path / 'html.csv'
    path.write_text(
        'S/N,Local government,Ward,School name,Address\n'
        '1,Ikeja,Ward A,<script>x</script>Ikeja School, <b>1 Allen Avenue</b> \n',
        encoding='utf-8'
    )

    with app.app_context():
        import_audits_from_csv(str(path))
        audit = db.session.get(Audit, 1)
        assert '<script>' not in audit.school_name
        assert audit.school_name.endswith('Ikeja School')
        assert audit.school_address == '1 Allen Avenue'
