"""Tests for paste API endpoints."""

from unittest.mock import Mock

from dropcommon.constants import MINUTE_MS
from dropserver import service_locator
from dropserver.exceptions import StorageError
from dropserver.repositories import PasteRepository


def test_root_endpoint(api):
    response = api.get('/')
    assert response.status_code == 200
    assert response.json()['status'] == 'running'


def test_health_endpoint(api):
    response = api.get('/health')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_ready_endpoint(api):
    response = api.get('/ready')
    assert response.status_code == 200
    assert response.json()['ready'] is True


def test_ready_reports_storage_failure(api, upload_repo):
    broken = Mock(spec=PasteRepository)
    broken.exists.side_effect = StorageError("down")
    service_locator.set_repositories(broken, upload_repo)

    response = api.get('/ready')

    assert response.status_code == 503
    assert response.json()['ready'] is False


def test_limits_endpoint(api):
    response = api.get('/limits')

    assert response.status_code == 200
    data = response.json()
    assert data['maxFileSize'] == 500 * 1024 * 1024
    assert data['maxFiles'] == 20
    assert data['chunkSize'] == 3 * 1024 * 1024
    assert data['expirationOptions']['5min'] == 5 * MINUTE_MS
    assert data['defaultExpiration'] == '30min'


def test_request_id_header(api):
    response = api.get('/', headers={'X-Request-ID': 'abc-123'})
    assert response.headers['X-Request-ID'] == 'abc-123'
    assert api.get('/').headers['X-Request-ID']


def test_create_and_get_text(api, clock):
    response = api.post('/paste', json={'content': 'hello', 'expirationOption': '5min'})

    assert response.status_code == 201
    created = response.json()
    assert set(created) == {'code', 'expiresAt'}
    assert created['expiresAt'] == clock.now + 5 * MINUTE_MS

    response = api.get(f"/paste/{created['code']}")
    assert response.status_code == 200
    data = response.json()
    assert data['content'] == 'hello'
    assert data['expiresAt'] - data['createdAt'] == 300000
    assert data['timeRemaining'] == 5 * MINUTE_MS
    assert data['isFile'] is False
    assert data['isMultiFile'] is False
    assert data['files'] == []
    assert data['downloadCount'] == 1


def test_text_expires_after_five_minutes(api, clock):
    code = api.post('/paste', json={'content': 'hello', 'expirationOption': '5min'}).json()['code']

    clock.advance(4 * MINUTE_MS)
    response = api.get(f'/paste/{code}')
    assert response.status_code == 200
    assert response.json()['timeRemaining'] == MINUTE_MS

    clock.advance(MINUTE_MS + 1)
    response = api.get(f'/paste/{code}')
    assert response.status_code == 404
    assert response.json() == {'detail': 'Content not found or expired', 'code': 'NOT_FOUND'}


def test_get_invalid_code(api):
    response = api.get('/paste/abcd')
    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_CODE_FORMAT'


def test_get_unknown_code(api):
    response = api.get('/paste/0000')
    assert response.status_code == 404


def test_create_missing_content(api):
    response = api.post('/paste', json={})
    assert response.status_code == 400
    assert response.json() == {'detail': 'Content is required', 'code': 'VALIDATION_ERROR'}


def test_create_wrong_type_is_validation_error(api):
    response = api.post('/paste', json={'content': 'x', 'isFile': 'maybe'})
    assert response.status_code == 400
    assert response.json()['code'] == 'VALIDATION_ERROR'
    assert 'isFile' in response.json()['detail']


def test_create_single_file(api, make_data_uri):
    content = make_data_uri(b'%PDF-1.4', 'application/pdf')
    response = api.post('/paste', json={
        'content': content,
        'isFile': True,
        'fileName': 'doc.pdf',
        'fileType': 'application/pdf',
        'allowEditing': True,
    })
    assert response.status_code == 201

    data = api.get(f"/paste/{response.json()['code']}").json()
    assert data['isFile'] is True
    assert data['fileName'] == 'doc.pdf'
    assert data['fileType'] == 'application/pdf'
    assert data['content'] == content
    assert data['allowEditing'] is False


def test_create_multi_file(api, make_data_uri):
    files = [
        {'name': 'a.txt', 'type': 'text/plain', 'content': make_data_uri(b'a', 'text/plain')},
        {'name': 'b.txt', 'type': 'text/plain', 'content': make_data_uri(b'b', 'text/plain')},
    ]
    response = api.post('/paste', json={'files': files, 'isMultiFile': True, 'isFile': True})
    assert response.status_code == 201

    data = api.get(f"/paste/{response.json()['code']}").json()
    assert data['isMultiFile'] is True
    assert data['isFile'] is False
    assert data['files'] == files


def test_file_one_byte_over_limit(api, small_limits):
    at_limit = 'data:application/octet-stream;base64,' + 'A' * 1332
    over_limit = 'data:application/octet-stream;base64,' + 'A' * 1336

    ok = api.post('/paste', json={'content': at_limit, 'isFile': True, 'fileName': 'ok.bin'})
    too_big = api.post('/paste', json={'content': over_limit, 'isFile': True, 'fileName': 'big.bin'})

    assert ok.status_code == 201
    assert too_big.status_code == 400
    assert too_big.json()['code'] == 'PAYLOAD_TOO_LARGE'
    assert 'File size exceeds' in too_big.json()['detail']


def test_multi_file_aggregate_limit(api, small_limits):
    body = 'A' * 1200
    files = [
        {'name': 'a.bin', 'content': f'data:application/octet-stream;base64,{body}'},
        {'name': 'b.bin', 'content': f'data:application/octet-stream;base64,{body}'},
    ]

    response = api.post('/paste', json={'files': files, 'isMultiFile': True})

    assert response.status_code == 400
    assert 'Total size of files exceeds' in response.json()['detail']


def test_edit_flow(api):
    code = api.post('/paste', json={'content': 'v1', 'allowEditing': True}).json()['code']

    response = api.put('/paste', json={'code': code, 'content': 'v2'})
    assert response.status_code == 200
    assert response.json() == {'success': True}

    assert api.get(f'/paste/{code}').json()['content'] == 'v2'


def test_edit_not_allowed(api):
    code = api.post('/paste', json={'content': 'v1'}).json()['code']

    response = api.put('/paste', json={'code': code, 'content': 'v2'})

    assert response.status_code == 403
    assert response.json()['code'] == 'EDIT_FORBIDDEN'


def test_edit_file_forbidden(api, make_data_uri):
    code = api.post('/paste', json={
        'content': make_data_uri(b'abc'), 'isFile': True, 'fileName': 'a.bin',
    }).json()['code']

    response = api.put('/paste', json={'code': code, 'content': 'text'})

    assert response.status_code == 403


def test_edit_missing_fields(api):
    response = api.put('/paste', json={'code': '1234'})
    assert response.status_code == 400
    assert response.json()['detail'] == 'Code and content are required'


def test_edit_unknown_code(api):
    response = api.put('/paste', json={'code': '1234', 'content': 'x'})
    assert response.status_code == 404


def test_delete_paste(api):
    code = api.post('/paste', json={'content': 'bye'}).json()['code']

    assert api.delete(f'/paste/{code}').json() == {'success': True}
    assert api.get(f'/paste/{code}').status_code == 404
    assert api.delete(f'/paste/{code}').status_code == 200


def test_storage_error_is_generic_500(api, upload_repo):
    broken = Mock(spec=PasteRepository)
    broken.exists.return_value = False
    broken.purge_expired.return_value = 0
    broken.insert_if_absent.side_effect = StorageError("redis insert failed: secret detail")
    service_locator.set_repositories(broken, upload_repo)

    response = api.post('/paste', json={'content': 'hello'})

    assert response.status_code == 500
    assert response.json() == {'detail': 'Storage error', 'code': 'STORAGE_ERROR'}


def test_create_file_with_truncated_base64(api):
    response = api.post('/paste', json={'content': 'data:x/y;base64,abc', 'isFile': True, 'fileName': 'a.bin'})

    assert response.status_code == 400
    assert response.json() == {'detail': 'File content is not valid base64', 'code': 'VALIDATION_ERROR'}
