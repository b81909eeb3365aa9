"""HTTP client for communicating with the CodeDrop server."""

import base64
import math
import sys
import time
import uuid
from pathlib import Path
from typing import Optional

import httpx

from dropcli.config import Config
from dropcli.constants import GREEN, RESET
from dropcli.utils import from_data_uri, guess_mime_type, preview, safe_file_name, to_data_uri
from dropcommon.constants import (
    CHUNK_SIZE_BYTES,
    MAX_FILE_SIZE_BYTES,
    MAX_FILES,
    MAX_TOTAL_FILES_SIZE_BYTES,
)
from dropcommon.formatting import format_expiration_time, format_file_size
from dropcommon.logging_config import get_logger

logger = get_logger(__name__)


class DropClient:
    """HTTP client for the CodeDrop API with retry logic and error handling."""

    def __init__(self, config: Config, base_url: Optional[str] = None):
        """
        Initialize client.

        Args:
            config: Configuration instance
            base_url: Server URL for this session instead of the configured one
        """
        self.config = config
        self.base_url = (base_url or config.get_base_url()).rstrip('/')
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=config.get_timeout()
        )
        self.request_id = None
        self._limits: Optional[dict] = None
        logger.info(f"Initialized DropClient [base_url={self.base_url}]")

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        if last_exception is not None:
            raise ConnectionError("Cannot connect to CodeDrop server. Is it running?")
        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'NOT_FOUND': 'Nothing is shared under that code, or it has expired.',
            'INVALID_CODE_FORMAT': 'Codes are 4 digits, e.g. 0421.',
            'EDIT_FORBIDDEN': f'This share cannot be edited: {detail}',
            'UPLOAD_NOT_FOUND': 'Upload session vanished or expired. Please send the file again.',
            'UPLOAD_EXPIRED': 'Upload session expired. Please send the file again.',
            'CODE_SPACE_EXHAUSTED': 'The server has no free codes right now. Try again later.',
            'STORAGE_ERROR': 'Server storage error. Please try again later.',
        }

        if code in error_messages:
            return error_messages[code]

        if code in ('VALIDATION_ERROR', 'PAYLOAD_TOO_LARGE', 'INVALID_CHUNK_INDEX',
                    'UPLOAD_INCOMPLETE', 'MISSING_CHUNK', 'UPLOAD_IN_PROGRESS'):
            return detail

        status_messages = {
            400: 'Bad request',
            403: 'Access forbidden',
            404: 'Not found',
            410: 'Gone',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def get_limits(self) -> dict:
        """
        Fetch server limits once, falling back to built-in defaults.
        """
        if self._limits is not None:
            return self._limits

        limits = {
            'maxFileSize': MAX_FILE_SIZE_BYTES,
            'maxTotalFilesSize': MAX_TOTAL_FILES_SIZE_BYTES,
            'maxFiles': MAX_FILES,
            'chunkSize': CHUNK_SIZE_BYTES,
        }
        try:
            response = self._request_with_retry('GET', '/limits', max_retries=0)
            if response.status_code == 200:
                limits.update(response.json())
            else:
                logger.warning(f"Could not fetch limits (status={response.status_code}), using defaults")
        except ConnectionError as e:
            logger.warning(f"Could not fetch limits ({e}), using defaults")

        self._limits = limits
        return limits

    def show_limits(self) -> str:
        limits = self.get_limits()
        return (
            f"Max file size: {format_file_size(limits['maxFileSize'])}\n"
            f"Max files per share: {limits['maxFiles']} "
            f"({format_file_size(limits['maxTotalFilesSize'])} total)\n"
            f"Upload chunk size: {format_file_size(limits['chunkSize'])}"
        )

    def share_text(self, content: str, expiration: Optional[str] = None, editable: bool = False) -> str:
        """
        Share a text snippet.

        Returns:
            Message with the share code
        """
        expiration = expiration or self.config.get_default_expiration()
        logger.info(f"Sharing text ({len(content)} chars, expiration={expiration})")
        try:
            response = self._request_with_retry('POST', '/paste', json={
                'content': content,
                'expirationOption': expiration,
                'allowEditing': editable,
            })
            if response.status_code != 201:
                return f"Share failed: {self._format_error(response)}"

            data = response.json()
            self.config.add_history(data['code'], preview(content), data['expiresAt'])
            return self._shared_message(data['code'], data['expiresAt'])

        except ConnectionError as e:
            logger.error(f"Connection error while sharing text: {e}")
            return f"Error: {e}"

    def share_files(self, file_paths: list[str], expiration: Optional[str] = None) -> str:
        """
        Share one or more files.

        A single file larger than one chunk goes through the chunked upload
        endpoints; several files are sent together as one multi-file share.

        Returns:
            Message with the share code or the first error found
        """
        expiration = expiration or self.config.get_default_expiration()
        limits = self.get_limits()

        paths = []
        for file_path in file_paths:
            path = Path(file_path).expanduser()
            if not path.is_file():
                return f"Error: File not found: {file_path}"
            size = path.stat().st_size
            if size == 0:
                return f"Error: File is empty: {file_path}"
            if size > limits['maxFileSize']:
                return f"Error: {path.name} exceeds {format_file_size(limits['maxFileSize'])} limit"
            paths.append(path)

        try:
            if len(paths) == 1:
                path = paths[0]
                if path.stat().st_size > limits['chunkSize']:
                    return self._chunked_upload(path, expiration, limits['chunkSize'])
                return self._single_upload(path, expiration)
            return self._multi_upload(paths, expiration, limits)
        except ConnectionError as e:
            logger.error(f"Connection error while sharing files: {e}")
            return f"Error: {e}"

    def _single_upload(self, path: Path, expiration: str) -> str:
        mime_type = guess_mime_type(path)
        response = self._request_with_retry('POST', '/paste', json={
            'content': to_data_uri(path.read_bytes(), mime_type),
            'isFile': True,
            'fileName': path.name,
            'fileType': mime_type,
            'expirationOption': expiration,
        })
        if response.status_code != 201:
            return f"Share failed: {self._format_error(response)}"

        data = response.json()
        self.config.add_history(data['code'], path.name, data['expiresAt'])
        return self._shared_message(data['code'], data['expiresAt'])

    def _multi_upload(self, paths: list[Path], expiration: str, limits: dict) -> str:
        if len(paths) > limits['maxFiles']:
            return f"Error: Maximum {limits['maxFiles']} files allowed"

        total_size = sum(p.stat().st_size for p in paths)
        if total_size > limits['maxTotalFilesSize']:
            return f"Error: Total size exceeds {format_file_size(limits['maxTotalFilesSize'])} limit"

        files = []
        for path in paths:
            mime_type = guess_mime_type(path)
            files.append({
                'name': path.name,
                'type': mime_type,
                'content': to_data_uri(path.read_bytes(), mime_type),
            })

        response = self._request_with_retry('POST', '/paste', json={
            'files': files,
            'isMultiFile': True,
            'expirationOption': expiration,
        })
        if response.status_code != 201:
            return f"Share failed: {self._format_error(response)}"

        data = response.json()
        self.config.add_history(data['code'], ", ".join(p.name for p in paths), data['expiresAt'])
        return self._shared_message(data['code'], data['expiresAt'])

    def _chunked_upload(self, path: Path, expiration: str, chunk_size: int) -> str:
        """
        Upload a large file as base64 chunks of ``chunk_size`` raw bytes.
        """
        # Every slice but the last must encode without padding.
        chunk_size = max(3, chunk_size - chunk_size % 3)
        file_size = path.stat().st_size
        total_chunks = math.ceil(file_size / chunk_size)
        mime_type = guess_mime_type(path)

        logger.info(f"Starting chunked upload of {path.name} ({file_size} bytes, {total_chunks} chunks)")
        response = self._request_with_retry('POST', '/upload/start', json={
            'fileName': path.name,
            'fileType': mime_type,
            'fileSize': file_size,
            'totalChunks': total_chunks,
        })
        if response.status_code != 201:
            return f"Upload failed: {self._format_error(response)}"

        upload_id = response.json()['uploadId']

        with open(path, 'rb') as f:
            for index in range(total_chunks):
                chunk = f.read(chunk_size)
                response = self._request_with_retry('POST', '/upload/chunk', json={
                    'uploadId': upload_id,
                    'chunkIndex': index,
                    'chunkData': base64.b64encode(chunk).decode('ascii'),
                })
                if response.status_code != 200:
                    sys.stdout.write('\n')
                    return f"Upload failed at chunk {index + 1}/{total_chunks}: {self._format_error(response)}"

                progress = response.json()['progress']
                sys.stdout.write(f"\rUploading {path.name}: {GREEN}{progress}%{RESET}")
                sys.stdout.flush()
        sys.stdout.write('\n')

        response = self._request_with_retry('POST', '/upload/complete', json={
            'uploadId': upload_id,
            'expirationOption': expiration,
        })
        if response.status_code != 201:
            return f"Upload failed: {self._format_error(response)}"

        data = response.json()
        self.config.add_history(data['code'], path.name, data['expiresAt'])
        return self._shared_message(data['code'], data['expiresAt'])

    def fetch(self, code: str, output_dir: Optional[str] = None) -> str:
        """
        Retrieve a share. Text is returned for display; files are written
        to ``output_dir`` (default: downloads/).
        """
        try:
            response = self._request_with_retry('GET', f'/paste/{code}')
        except ConnectionError as e:
            logger.error(f"Connection error while fetching {code}: {e}")
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Fetch failed: {self._format_error(response)}"

        data = response.json()
        remaining = f"expires in {format_expiration_time(data['timeRemaining'])}"

        if not data['isFile'] and not data['isMultiFile']:
            editable = ", editable" if data['allowEditing'] else ""
            return f"--- {code} ({remaining}{editable}) ---\n{data['content']}"

        target_dir = Path(output_dir or 'downloads').expanduser()
        target_dir.mkdir(parents=True, exist_ok=True)

        if data['isMultiFile']:
            entries = [(f['name'], f['content']) for f in data['files']]
        else:
            entries = [(data.get('fileName') or f'{code}.bin', data['content'])]

        saved = []
        for name, content in entries:
            try:
                _, raw = from_data_uri(content)
            except ValueError as e:
                logger.warning(f"Skipping malformed file '{name}' in share {code}: {e}")
                saved.append(f"Skipped {name}: {e}")
                continue
            output_file = target_dir / safe_file_name(name)
            with open(output_file, 'wb') as f:
                f.write(raw)
            saved.append(f"Saved {output_file} ({format_file_size(len(raw))})")

        return "\n".join(saved + [f"Share {code} {remaining}"])

    def edit(self, code: str, content: str) -> str:
        try:
            response = self._request_with_retry('PUT', '/paste', json={'code': code, 'content': content})
        except ConnectionError as e:
            logger.error(f"Connection error while editing {code}: {e}")
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Edit failed: {self._format_error(response)}"
        return f"Updated {code}"

    def remove(self, code: str) -> str:
        try:
            response = self._request_with_retry('DELETE', f'/paste/{code}')
        except ConnectionError as e:
            logger.error(f"Connection error while removing {code}: {e}")
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Remove failed: {self._format_error(response)}"
        self.config.remove_history(code)
        return f"Removed {code}"

    def _shared_message(self, code: str, expires_at: int) -> str:
        remaining = expires_at - int(time.time() * 1000)
        return f"Shared! Code: {GREEN}{code}{RESET} (expires in {format_expiration_time(remaining)})"

    def close(self) -> None:
        self.session.close()
