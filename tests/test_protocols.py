"""Protocol conformance of the shipped implementations."""
from chunk_uploader.protocols import ICancellationSignal, IProgressSink, ITransport
from chunk_uploader.cli_progress import SingleFileUploadProgress
from chunk_uploader.services.api_client import HTTPTransport
from chunk_uploader.utils.cancellation import CancellationToken


def test_http_transport_is_transport():
    assert isinstance(HTTPTransport("http://upload.test"), ITransport)


def test_cancellation_token_is_signal():
    assert isinstance(CancellationToken(), ICancellationSignal)


def test_console_progress_callback_is_sink():
    progress = SingleFileUploadProgress("clip.mp4", 10)
    assert isinstance(progress.get_callback(), IProgressSink)
