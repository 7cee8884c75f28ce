"""Tests for single-step execution."""

import pytest

from fluxo_ia.core.config import RunOptions
from fluxo_ia.core.exceptions import SessionError
from fluxo_ia.core.executor import StepExecutor
from fluxo_ia.core.state import RawStep, StepStatus


@pytest.fixture
def executor(session) -> StepExecutor:
    return StepExecutor(session)


async def test_success_record(executor, driver):
    record = await executor.execute(RawStep("1. Clique no elemento \"Repositories\""), "Navegação")

    assert record.status == StepStatus.SUCCESS
    assert record.group == "Navegação"
    assert record.description == 'Clique no elemento "Repositories"'
    assert record.error is None
    assert record.duration_ms >= 0
    assert driver.calls == [("click", "Repositories")]


async def test_plain_string_step(executor, driver):
    record = await executor.execute("Aguarde 2 segundos")

    assert record.succeeded
    assert record.group == "Geral"
    assert driver.calls == [("wait", 2000)]


async def test_unrecognized_sentence_is_a_failed_step(executor, driver):
    record = await executor.execute("Faça algo mágico")

    assert record.status == StepStatus.FAILURE
    assert record.error == "Comando não reconhecido: Faça algo mágico"
    assert driver.calls == []


async def test_driver_error_is_a_failed_step(executor):
    record = await executor.execute('Clique no botão "Inexistente"')

    assert not record.succeeded
    assert record.error == 'Nenhum elemento encontrado para "Inexistente"'


async def test_session_error_propagates(executor, driver):
    driver.dead = True

    with pytest.raises(SessionError):
        await executor.execute("Atualize a página")


async def test_fill_and_select(executor, driver):
    await executor.execute('Digite "1000" no campo "Valor Inicial"')
    await executor.execute('Selecione "Mensal" no dropdown "Período"')

    assert driver.calls == [
        ("fill", "Valor Inicial", "1000"),
        ("select_option", "Período", "Mensal"),
    ]


async def test_scroll_variants(executor, driver):
    await executor.execute('Role até o elemento "Rodapé"')
    await executor.execute("Role a página")

    assert driver.operations() == ["scroll_into_view", "scroll_to_bottom"]


class TestVerify:
    async def test_title_contains_passes(self, executor):
        record = await executor.execute('Verifique se o título contém "Lucasdoreac"')

        assert record.succeeded

    async def test_title_contains_fails_with_message(self, executor, driver):
        driver.title = "GitHub"
        record = await executor.execute('Verifique se o título contém "Inexistente"')

        assert not record.succeeded
        assert record.error == 'Título não contém "Inexistente". Título atual: "GitHub"'

    async def test_title_equals(self, executor, driver):
        driver.title = "Home"

        assert (await executor.execute('Verifique se o título é "Home"')).succeeded
        assert not (await executor.execute('Verifique se o título é "Hom"')).succeeded

    async def test_element_visible(self, executor):
        ok = await executor.execute('Verifique se o elemento "Repositories" está visível')
        bad = await executor.execute('Verifique se o elemento "Stars" está visível')

        assert ok.succeeded
        assert bad.error == 'Elemento "Stars" não está visível'

    async def test_element_exists(self, executor):
        record = await executor.execute('Verifique se o elemento "Stars" existe')

        assert record.error == 'Elemento "Stars" não existe'

    async def test_element_contains_text(self, executor):
        ok = await executor.execute('Verifique se o elemento "Bio" contém "Python"')
        bad = await executor.execute('Verifique se o elemento "Bio" contém "Java"')

        assert ok.succeeded
        assert bad.error.startswith('Elemento "Bio" não contém "Java"')

    async def test_url(self, executor):
        ok = await executor.execute('Verifique se a URL contém "Lucasdoreac"')
        bad = await executor.execute('Verifique se a URL contém "tab=repositories"')

        assert ok.succeeded
        assert bad.error == (
            'URL não contém "tab=repositories". URL atual: "https://github.com/Lucasdoreac"'
        )

    async def test_log(self, executor, session, driver):
        driver.emit_console("log", "Página carregada")

        assert (await executor.execute('Verifique se existe um log "carregada"')).succeeded
        record = await executor.execute('Verifique se existe um log "erro fatal"')
        assert record.error == 'Log "erro fatal" não encontrado'

    async def test_without_subject_fails(self, executor):
        record = await executor.execute("Verifique se tudo está certo")

        assert not record.succeeded


class TestCapture:
    async def test_screenshot_recorded_on_session(self, executor, session):
        await executor.execute("Capture screenshot")
        await executor.execute("Capture screenshot")

        assert session.screenshots == ["screenshot_0.png", "screenshot_1.png"]

    async def test_screenshot_disabled(self, executor, session, driver):
        options = RunOptions(captureScreenshots=False)
        record = await executor.execute("Capture screenshot", options=options)

        assert record.succeeded
        assert session.screenshots == []
        assert driver.calls == []

    async def test_capture_logs_is_a_no_op(self, executor, driver):
        assert (await executor.execute("Capture os logs do console")).succeeded
        assert driver.calls == []

    async def test_extract_stores_text(self, executor, session):
        record = await executor.execute('Extraia o texto do elemento "Bio"')

        assert record.succeeded
        assert session.extractions == {"Bio": "Desenvolvedor Python"}

    async def test_extract_without_target(self, executor, session):
        assert (await executor.execute("Extraia os dados da tabela")).succeeded
        assert session.extractions == {}
