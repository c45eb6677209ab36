"""Login and logout against a real FTP server (aioftp) running in a background loop."""

import asyncio
import threading

import aioftp
import pytest

from ftpput import FileTransferClient, ProtocolError, Timeout


@pytest.fixture
def ftp_server():
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()

    async def start() -> aioftp.Server:
        server = aioftp.Server([aioftp.User("alice", "secret")])
        await server.start("127.0.0.1", 0)
        return server

    server = asyncio.run_coroutine_threadsafe(start(), loop).result(10)
    port = server.server.sockets[0].getsockname()[1]
    yield port

    asyncio.run_coroutine_threadsafe(server.close(), loop).result(10)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(10)
    loop.close()


def test_connect_and_disconnect(ftp_server):
    client = FileTransferClient(port=ftp_server, timeout=Timeout(connect=5, read=5))

    reply = client.connect("127.0.0.1", "alice", "secret")
    assert reply.code == "230"
    client.disconnect()
    assert not client.connected


def test_wrong_password(ftp_server):
    client = FileTransferClient(port=ftp_server, timeout=Timeout(connect=5, read=5))

    with pytest.raises(ProtocolError) as caught:
        client.connect("127.0.0.1", "alice", "wrong")
    assert caught.value.code == "530"
    assert not client.connected
