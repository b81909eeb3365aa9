"""Unit and end-to-end tests for DropClient."""

import httpx
import pytest
from fastapi.testclient import TestClient

from dropcli import client as client_module
from dropcli.client import DropClient
from dropserver.main import app


def make_client(config, handler):
    drop_client = DropClient(config)
    drop_client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    return drop_client


@pytest.fixture
def live_client(temp_config):
    """DropClient wired to the in-process FastAPI app."""
    drop_client = DropClient(temp_config)
    drop_client.session = TestClient(app)
    return drop_client


class TestErrorHandling:

    def test_not_found_message(self, temp_config):
        def handler(request):
            return httpx.Response(404, json={'detail': 'Content not found or expired', 'code': 'NOT_FOUND'})

        result = make_client(temp_config, handler).fetch('0421')

        assert 'Fetch failed' in result
        assert 'expired' in result

    def test_validation_detail_passed_through(self, temp_config):
        def handler(request):
            return httpx.Response(400, json={'detail': 'Maximum 20 files allowed', 'code': 'PAYLOAD_TOO_LARGE'})

        result = make_client(temp_config, handler).share_text('hi')

        assert result == 'Share failed: Maximum 20 files allowed'

    def test_non_json_error(self, temp_config):
        def handler(request):
            return httpx.Response(503, text='upstream down')

        result = make_client(temp_config, handler).remove('0421')

        assert 'Service unavailable' in result

    def test_connection_error(self, temp_config):
        def handler(request):
            raise httpx.ConnectError('refused', request=request)

        result = make_client(temp_config, handler).share_text('hi')

        assert 'Cannot connect' in result

    def test_retries_server_errors(self, temp_config, monkeypatch):
        monkeypatch.setattr(client_module.time, 'sleep', lambda seconds: None)
        temp_config.data['max_retries'] = 2
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(500, json={'detail': 'Storage error', 'code': 'STORAGE_ERROR'})
            return httpx.Response(200, json={'success': True})

        result = make_client(temp_config, handler).edit('0421', 'new')

        assert result == 'Updated 0421'
        assert len(calls) == 3
        assert calls[0].headers['X-Request-ID']

    def test_client_errors_not_retried(self, temp_config):
        calls = []
        temp_config.data['max_retries'] = 3

        def handler(request):
            calls.append(request)
            return httpx.Response(403, json={'detail': 'Editing is not allowed for this content', 'code': 'EDIT_FORBIDDEN'})

        result = make_client(temp_config, handler).edit('0421', 'new')

        assert 'cannot be edited' in result
        assert len(calls) == 1

    def test_limits_fall_back_to_defaults(self, temp_config):
        def handler(request):
            return httpx.Response(404)

        limits = make_client(temp_config, handler).get_limits()

        assert limits['chunkSize'] == 3 * 1024 * 1024
        assert limits['maxFiles'] == 20


class TestShareFiles:

    def test_missing_file(self, live_client):
        result = live_client.share_files(['/nonexistent/file.txt'])
        assert 'File not found' in result

    def test_empty_file(self, live_client, tmp_path):
        empty = tmp_path / 'empty.txt'
        empty.write_bytes(b'')

        assert 'File is empty' in live_client.share_files([str(empty)])

    def test_too_many_files(self, live_client, multiple_sample_files):
        live_client._limits = dict(live_client.get_limits(), maxFiles=2)

        result = live_client.share_files([str(p) for p in multiple_sample_files])

        assert 'Maximum 2 files allowed' in result

    def test_small_file_sent_in_one_request(self, temp_config, sample_file):
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.path == '/limits':
                return httpx.Response(404)
            return httpx.Response(201, json={'code': '0421', 'expiresAt': 10 ** 15})

        result = make_client(temp_config, handler).share_files([str(sample_file)])

        assert '0421' in result
        assert [r.url.path for r in requests] == ['/limits', '/paste']
        assert temp_config.get_history()[0]['label'] == 'notes.txt'


class TestEndToEnd:

    def test_text_share_and_fetch(self, live_client, temp_config):
        result = live_client.share_text('hello world', expiration='5min')
        assert 'Shared! Code:' in result

        code = temp_config.get_history()[0]['code']
        fetched = live_client.fetch(code)

        assert fetched.endswith('hello world')
        assert 'expires in 4 minutes' in fetched or 'expires in 5 minutes' in fetched

    def test_edit_and_remove(self, live_client, temp_config):
        live_client.share_text('v1', editable=True)
        code = temp_config.get_history()[0]['code']

        assert live_client.edit(code, 'v2') == f'Updated {code}'
        assert live_client.fetch(code).endswith('v2')

        assert live_client.remove(code) == f'Removed {code}'
        assert temp_config.get_history() == []
        assert 'Fetch failed' in live_client.fetch(code)

    def test_edit_non_editable(self, live_client, temp_config):
        live_client.share_text('v1')
        code = temp_config.get_history()[0]['code']

        assert 'cannot be edited' in live_client.edit(code, 'v2')

    def test_single_file_round_trip(self, live_client, temp_config, sample_file, tmp_path):
        live_client.share_files([str(sample_file)])
        code = temp_config.get_history()[0]['code']

        result = live_client.fetch(code, str(tmp_path / 'out'))

        assert 'Saved' in result
        assert (tmp_path / 'out' / 'notes.txt').read_text() == 'Sample content for testing'

    def test_chunked_file_round_trip(self, live_client, temp_config, tmp_path):
        raw = bytes(range(256)) * 4 + b'tail'
        source = tmp_path / 'data.bin'
        source.write_bytes(raw)
        live_client._limits = dict(live_client.get_limits(), chunkSize=300)

        result = live_client.share_files([str(source)], expiration='1hour')
        assert 'Shared! Code:' in result

        code = temp_config.get_history()[0]['code']
        live_client.fetch(code, str(tmp_path / 'out'))

        assert (tmp_path / 'out' / 'data.bin').read_bytes() == raw

    def test_chunked_upload_with_unaligned_chunk_size(self, live_client, temp_config, tmp_path):
        raw = bytes(range(256)) * 4 + b'tail'
        source = tmp_path / 'odd.bin'
        source.write_bytes(raw)
        live_client._limits = dict(live_client.get_limits(), chunkSize=301)

        result = live_client.share_files([str(source)])
        assert 'Shared! Code:' in result

        code = temp_config.get_history()[0]['code']
        live_client.fetch(code, str(tmp_path / 'out'))

        assert (tmp_path / 'out' / 'odd.bin').read_bytes() == raw

    def test_multi_file_round_trip(self, live_client, temp_config, multiple_sample_files, tmp_path):
        live_client.share_files([str(p) for p in multiple_sample_files])
        entry = temp_config.get_history()[0]

        assert entry['label'] == 'part0.txt, part1.txt, part2.txt'

        live_client.fetch(entry['code'], str(tmp_path / 'out'))
        for i in range(3):
            assert (tmp_path / 'out' / f'part{i}.txt').read_text() == f'Sample content {i}'

    def test_show_limits(self, live_client):
        result = live_client.show_limits()

        assert 'Max file size: 500.00 MiB' in result
        assert 'Max files per share: 20' in result
