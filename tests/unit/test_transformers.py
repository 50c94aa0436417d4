"""
Unit tests for the tipo label and the registro enricher
"""

from datetime import datetime
import pytest
from ingestion.transformers.enricher import RegistroEnricher, has_participante_externo
from ingestion.transformers.tipo_parser import extract_tipo
from models.contrato import Contrato
from models.registro import Registro


@pytest.mark.parametrize("data_field,expected", [
    ("Abertura 0.0\n24/07/2025", "Abertura"),
    ("Medição 0.0", "Medição"),
    ("Medição 0.0 Final", "Medição  Final"),
    ("Versão 10.0", "Versão 10.0"),
    ("0.0", ""),
    ("\nSegunda linha", "Segunda linha"),
    ("Cadastro\r\nOutra", "Cadastro"),
    ("", ""),
    (None, ""),
])
def test_extract_tipo(data_field, expected):
    assert extract_tipo(data_field) == expected


class TestRegistroEnricher:
    """Derived views on top of stored rows"""

    @pytest.fixture
    def registro(self):
        contrato = Contrato(id=1, numero="4600013206")
        return Registro(
            id=7,
            contrato_id=1,
            contrato=contrato,
            autor="Protocolo: 20250724145613 - Funcionário: UALAS SILVA DE ALMEIDA - Contrato: SUB 02 - 4600013206 - Polo:",
            data="Abertura 0.0\n24/07/2025",
            extra_info="Enviar documentação\nUALAS SILVA\n01/12/2024 10:00",
            numero="123",
            prazo="01/12/2024",
            status="Pendente",
            tipo="Cadastro",
            created_at=datetime(2024, 12, 1, 12, 0),
            updated_at=datetime(2024, 12, 1, 12, 0),
        )

    def test_enrich_combines_raw_and_derived(self, registro):
        view = RegistroEnricher(now=datetime(2024, 12, 11, 10, 0)).enrich(registro)

        assert view.id == 7
        assert view.contrato == "4600013206"
        assert view.status == "Pendente"
        assert view.autor_info.protocolo == "20250724145613"
        assert view.autor_info.funcionario == "UALAS SILVA DE ALMEIDA"
        assert view.autor_info.contrato_filho == "SUB 02"
        assert view.tipo_label == "Abertura"
        assert len(view.pendencias) == 1
        assert view.pendencias[0].acao == "Enviar documentação"
        assert view.pendencias[0].delta_dias == 10

    def test_explicit_contract_number_wins(self, registro):
        view = RegistroEnricher().enrich(registro, contrato_numero="outro")
        assert view.contrato == "outro"

    def test_empty_extra_info(self, registro):
        registro.extra_info = ""
        registro.numero = None

        view = RegistroEnricher().enrich(registro)

        assert view.pendencias == []
        assert view.extra_info == ""
        assert view.numero is None

    def test_external_participant_flag(self, registro):
        assert RegistroEnricher().enrich(registro).has_participante_externo is False

        registro.extra_info = "Vistoria COM PARTICIPANTE EXTERNO\nAna\n05/12/2024"

        assert RegistroEnricher().enrich(registro).has_participante_externo is True

    def test_views_are_not_written_back(self, registro):
        RegistroEnricher().enrich(registro)

        assert registro.autor.startswith("Protocolo:")
        assert registro.data == "Abertura 0.0\n24/07/2025"


@pytest.mark.parametrize("fields,expected", [
    (("Reunião com participante externo", "Abertura", "Protocolo: 1"), True),
    (("", "Abertura com Participante Externo 0.0", "Protocolo: 1"), True),
    (("", "Abertura", "Contrato: 4600013206 | Escopo: com participante externo"), True),
    (("Reunião com participante interno", "Abertura", "Protocolo: 1"), False),
    ((None, "Abertura", None), False),
])
def test_has_participante_externo(fields, expected):
    assert has_participante_externo(*fields) is expected
