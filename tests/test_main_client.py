import asyncio
import sys

import pytest

from fake_server import SILENT, FakeRconServer
from main_client import ClientApplication, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('RCON_ADDRESS', 'RCON_PASSWORD', 'RCON_CONNECT_TIMEOUT', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)


def run_app(argv_for_server, server_kwargs):
    async def scenario():
        async with FakeRconServer(**server_kwargs) as server:
            args = parse_args(argv_for_server(server))
            return await ClientApplication(args).run()

    return asyncio.run(scenario())


def test_parse_args():
    args = parse_args(['--address', 'mc:25575', 'time', 'query', 'daytime'])
    assert args.address == 'mc:25575'
    assert args.password is None
    assert args.command == ['time', 'query', 'daytime']


def test_run_once_prints_response(capsys):
    code = run_app(
        lambda s: ['--address', s.address, '--password', 'secret', 'time', 'query', 'daytime'],
        {'responses': {'time query daytime': ['The time is ', '6000']}},
    )
    assert code == 0
    assert capsys.readouterr().out == 'The time is 6000\n'


def test_run_once_bad_password():
    code = run_app(
        lambda s: ['--address', s.address, '--password', 'wrong', 'list'],
        {},
    )
    assert code == 1


def test_missing_password_is_a_configuration_error():
    async def scenario():
        return await ClientApplication(parse_args(['list'])).run()

    assert asyncio.run(scenario()) == 1


def run_interrupted(argv_for_server):
    async def scenario():
        async with FakeRconServer() as server:
            app = ClientApplication(parse_args(argv_for_server(server)))
            task = asyncio.create_task(app.run())
            await asyncio.sleep(0.05)
            assert not task.done()

            app.handle_shutdown(2, None)
            code = await asyncio.wait_for(task, 2.0)
            await server.wait_for_disconnects(1)
            return code

    return asyncio.run(scenario())


def test_run_once_stops_on_shutdown_signal():
    code = run_interrupted(
        lambda s: ['--address', s.address, '--password', 'secret', SILENT],
    )
    assert code == 1


@pytest.fixture
def stdin_file(tmp_path, monkeypatch):
    def use(text):
        path = tmp_path / 'commands.txt'
        path.write_text(text)
        handle = open(path)
        monkeypatch.setattr(sys, 'stdin', handle)
        return handle

    handles = []
    yield lambda text: handles.append(use(text))
    for handle in handles:
        handle.close()


def test_console_reads_commands_from_regular_file(stdin_file, capsys):
    stdin_file('list\n\nseed\nexit\nlist\n')
    code = run_app(
        lambda s: ['--address', s.address, '--password', 'secret'],
        {'responses': {'list': ['There are 0 players'], 'seed': ['Seed: [42]']}},
    )
    assert code == 0
    assert capsys.readouterr().out == 'There are 0 players\nSeed: [42]\n'


def test_console_stops_at_end_of_file(stdin_file, capsys):
    stdin_file('list')
    code = run_app(
        lambda s: ['--address', s.address, '--password', 'secret'],
        {'responses': {'list': ['There are 0 players']}},
    )
    assert code == 0
    assert capsys.readouterr().out == 'There are 0 players\n'


def test_console_stops_on_shutdown_signal(stdin_file):
    stdin_file(SILENT + '\n')
    code = run_interrupted(
        lambda s: ['--address', s.address, '--password', 'secret'],
    )
    assert code == 1
