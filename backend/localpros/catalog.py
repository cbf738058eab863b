"""
LocalPros Backend — Catalog Reference Data
============================================

What:  Static reference data used to validate and describe profiles and
       service requests: Brazilian states (UF), cities per state,
       professional categories, urgency levels and request statuses.
How:   Plain module-level constants plus small pure helpers; no database.
Who:   AccountService (address/category validation), ServiceRequestService
       (urgency), and the /api/catalog routes that feed the app's pickers.

City lists are the curated picker lists of the mobile app, not an
exhaustive IBGE registry; an address is valid only when its city appears
in the list for its state.
"""

import re
from typing import Dict, List, Tuple

STATES: List[Tuple[str, str]] = [
    ("AC", "Acre"),
    ("AL", "Alagoas"),
    ("AP", "Amapá"),
    ("AM", "Amazonas"),
    ("BA", "Bahia"),
    ("CE", "Ceará"),
    ("DF", "Distrito Federal"),
    ("ES", "Espírito Santo"),
    ("GO", "Goiás"),
    ("MA", "Maranhão"),
    ("MT", "Mato Grosso"),
    ("MS", "Mato Grosso do Sul"),
    ("MG", "Minas Gerais"),
    ("PA", "Pará"),
    ("PB", "Paraíba"),
    ("PR", "Paraná"),
    ("PE", "Pernambuco"),
    ("PI", "Piauí"),
    ("RJ", "Rio de Janeiro"),
    ("RN", "Rio Grande do Norte"),
    ("RS", "Rio Grande do Sul"),
    ("RO", "Rondônia"),
    ("RR", "Roraima"),
    ("SC", "Santa Catarina"),
    ("SP", "São Paulo"),
    ("SE", "Sergipe"),
    ("TO", "Tocantins")
]

CITIES_BY_STATE: Dict[str, List[str]] = {
    "SP": [
        "São Paulo", "Guarulhos", "Campinas", "São Bernardo do Campo", "Santo André",
        "Osasco", "Ribeirão Preto", "Sorocaba", "Santos", "Mauá", "São José dos Campos",
        "Mogi das Cruzes", "Diadema", "Jundiaí", "Carapicuíba", "Piracicaba",
        "Bauru", "São Vicente", "Franca", "Guarujá", "Taubaté", "Praia Grande",
        "Limeira", "Suzano", "Taboão da Serra", "Sumaré", "Barueri", "Embu das Artes",
        "São Carlos", "Marília", "Indaiatuba", "Cotia", "Americana", "Jacareí",
        "Araraquara", "Presidente Prudente", "Rio Claro", "Araçatuba", "Santa Bárbara d'Oeste"
    ],
    "RJ": [
        "Rio de Janeiro", "São Gonçalo", "Duque de Caxias", "Nova Iguaçu", "Niterói",
        "Belford Roxo", "São João de Meriti", "Campos dos Goytacazes", "Petrópolis",
        "Volta Redonda", "Magé", "Macaé", "Itaboraí", "Cabo Frio", "Angra dos Reis",
        "Nova Friburgo", "Barra Mansa", "Teresópolis", "Mesquita", "Nilópolis"
    ],
    "MG": [
        "Belo Horizonte", "Uberlândia", "Contagem", "Juiz de Fora", "Betim",
        "Montes Claros", "Ribeirão das Neves", "Uberaba", "Governador Valadares",
        "Ipatinga", "Sete Lagoas", "Divinópolis", "Santa Luzia", "Ibirité",
        "Poços de Caldas", "Patos de Minas", "Pouso Alegre", "Teófilo Otoni",
        "Barbacena", "Sabará", "Vespasiano", "Conselheiro Lafaiete", "Varginha"
    ],
    "RS": [
        "Porto Alegre", "Caxias do Sul", "Pelotas", "Canoas", "Santa Maria",
        "Gravataí", "Viamão", "Novo Hamburgo", "São Leopoldo", "Rio Grande",
        "Alvorada", "Passo Fundo", "Sapucaia do Sul", "Uruguaiana", "Santa Cruz do Sul",
        "Cachoeirinha", "Bagé", "Bento Gonçalves", "Erechim", "Guaíba"
    ],
    "PR": [
        "Curitiba", "Londrina", "Maringá", "Ponta Grossa", "Cascavel",
        "São José dos Pinhais", "Foz do Iguaçu", "Colombo", "Guarapuava",
        "Paranaguá", "Araucária", "Toledo", "Apucarana", "Pinhais",
        "Campo Largo", "Arapongas", "Almirante Tamandaré", "Umuarama",
        "Paranavaí", "Sarandi", "Fazenda Rio Grande", "Cambé", "Francisco Beltrão"
    ],
    "SC": [
        "Florianópolis", "Joinville", "Blumenau", "São José", "Criciúma",
        "Chapecó", "Itajaí", "Lages", "Jaraguá do Sul", "Palhoça",
        "Balneário Camboriú", "Brusque", "Tubarão", "São Bento do Sul",
        "Caçador", "Camboriú", "Navegantes", "Concórdia", "Rio do Sul", "Araranguá"
    ],
    "BA": [
        "Salvador", "Feira de Santana", "Vitória da Conquista", "Camaçari",
        "Itabuna", "Juazeiro", "Lauro de Freitas", "Ilhéus", "Jequié",
        "Teixeira de Freitas", "Alagoinhas", "Porto Seguro", "Simões Filho",
        "Paulo Afonso", "Eunápolis", "Candeias", "Guanambi", "Jacobina",
        "Serrinha", "Senhor do Bonfim", "Dias d'Ávila", "Luís Eduardo Magalhães"
    ],
    "GO": [
        "Goiânia", "Aparecida de Goiânia", "Anápolis", "Rio Verde", "Luziânia",
        "Águas Lindas de Goiás", "Valparaíso de Goiás", "Trindade", "Formosa",
        "Novo Gama", "Itumbiara", "Senador Canedo", "Catalão", "Jataí",
        "Planaltina", "Caldas Novas", "Santo Antônio do Descoberto", "Goianésia"
    ],
    "PE": [
        "Recife", "Jaboatão dos Guararapes", "Olinda", "Caruaru", "Petrolina",
        "Paulista", "Cabo de Santo Agostinho", "Camaragibe", "Garanhuns",
        "Vitória de Santo Antão", "Igarassu", "São Lourenço da Mata",
        "Santa Cruz do Capibaribe", "Abreu e Lima", "Ipojuca", "Serra Talhada",
        "Araripina", "Gravatá", "Carpina", "Goiana"
    ],
    "CE": [
        "Fortaleza", "Caucaia", "Juazeiro do Norte", "Maracanaú", "Sobral",
        "Crato", "Itapipoca", "Maranguape", "Iguatu", "Quixadá",
        "Canindé", "Aquiraz", "Pacatuba", "Crateús", "Russas",
        "Aracati", "Cascavel", "Pacajus", "Icó", "Horizonte"
    ],
    "PA": [
        "Belém", "Ananindeua", "Santarém", "Marabá", "Parauapebas",
        "Castanhal", "Abaetetuba", "Cametá", "Marituba", "Bragança",
        "Altamira", "Tucuruí", "Benevides", "Paragominas", "Redenção",
        "Barcarena", "Capanema", "Tailândia", "Oriximiná", "Breves"
    ],
    "MA": [
        "São Luís", "Imperatriz", "São José de Ribamar", "Timon", "Caxias",
        "Codó", "Paço do Lumiar", "Açailândia", "Bacabal", "Balsas",
        "Santa Inês", "Pinheiro", "Pedreiras", "Chapadinha", "Santa Luzia",
        "Barra do Corda", "Coelho Neto", "Rosário", "Presidente Dutra", "Viana"
    ],
    "AC": [
        "Rio Branco", "Cruzeiro do Sul", "Sena Madureira", "Tarauacá", "Feijó",
        "Brasiléia", "Plácido de Castro", "Xapuri", "Senador Guiomard", "Marechal Thaumaturgo"
    ],
    "AL": [
        "Maceió", "Arapiraca", "Rio Largo", "Palmeira dos Índios", "União dos Palmares",
        "Penedo", "São Miguel dos Campos", "Campo Alegre", "Delmiro Gouveia", "Coruripe"
    ],
    "AP": [
        "Macapá", "Santana", "Laranjal do Jari", "Oiapoque", "Porto Grande",
        "Mazagão", "Tartarugalzinho", "Pedra Branca do Amapari", "Ferreira Gomes", "Cutias"
    ],
    "AM": [
        "Manaus", "Parintins", "Itacoatiara", "Manacapuru", "Coari",
        "Tefé", "Benjamin Constant", "Tabatinga", "Maués", "Iranduba"
    ],
    "DF": [
        "Brasília", "Ceilândia", "Taguatinga", "Samambaia", "Planaltina",
        "Sobradinho", "Gama", "Recanto das Emas", "Santa Maria", "Guará"
    ],
    "ES": [
        "Vitória", "Vila Velha", "Serra", "Cariacica", "Cachoeiro de Itapemirim",
        "Linhares", "Guarapari", "Colatina", "Aracruz", "Viana"
    ],
    "MT": [
        "Cuiabá", "Várzea Grande", "Rondonópolis", "Sinop", "Tangará da Serra",
        "Cáceres", "Primavera do Leste", "Sorriso", "Barra do Garças", "Lucas do Rio Verde"
    ],
    "MS": [
        "Campo Grande", "Dourados", "Três Lagoas", "Corumbá", "Ponta Porã",
        "Naviraí", "Nova Andradina", "Paranaíba", "Aquidauana", "Sidrolândia"
    ],
    "PB": [
        "João Pessoa", "Campina Grande", "Santa Rita", "Patos", "Bayeux",
        "Sousa", "Cajazeiras", "Guarabira", "Cabedelo", "Itabaiana"
    ],
    "PI": [
        "Teresina", "Parnaíba", "Picos", "Piripiri", "Floriano",
        "Campo Maior", "Barras", "União", "José de Freitas", "Altos"
    ],
    "RN": [
        "Natal", "Mossoró", "Parnamirim", "São Gonçalo do Amarante", "Macaíba",
        "Ceará-Mirim", "Caicó", "Assú", "Currais Novos", "Santa Cruz"
    ],
    "RO": [
        "Porto Velho", "Ji-Paraná", "Ariquemes", "Vilhena", "Cacoal",
        "Rolim de Moura", "Guajará-Mirim", "Pimenta Bueno", "Jaru", "Ouro Preto do Oeste"
    ],
    "RR": [
        "Boa Vista", "Rorainópolis", "Caracaraí", "Cantá", "Alto Alegre",
        "Pacaraima", "Mucajaí", "Amajari", "Bonfim", "Iracema"
    ],
    "SE": [
        "Aracaju", "Nossa Senhora do Socorro", "Lagarto", "Itabaiana", "Estância",
        "São Cristóvão", "Itabaianinha", "Tobias Barreto", "Simão Dias", "Propriá"
    ],
    "TO": [
        "Palmas", "Araguaína", "Gurupi", "Porto Nacional", "Paraíso do Tocantins",
        "Colinas do Tocantins", "Guaraí", "Tocantinópolis", "Dianópolis", "Formoso do Araguaia"
    ]
}

PROFESSIONAL_CATEGORIES: List[str] = [
    "Eletricista",
    "Encanador",
    "Pedreiro",
    "Pintor",
    "Marceneiro",
    "Cabeleireiro",
    "Manicure",
    "Esteticista",
    "Diarista",
    "Jardineiro",
    "Técnico em Informática",
    "Mecânico",
    "Professor Particular",
    "Massagista",
    "Personal Trainer",
    "Fotógrafo",
    "Advogado",
    "Contador",
    "Arquiteto",
    "Designer",
    "Outros",
]

URGENCY_LEVELS: List[Tuple[str, str]] = [
    ("low", "Baixa - Posso aguardar alguns dias"),
    ("normal", "Normal - Dentro de alguns dias"),
    ("high", "Alta - Preciso em breve"),
    ("urgent", "Urgente - Preciso hoje/amanhã"),
]
DEFAULT_URGENCY = "normal"

# pending → accepted → completed; pending | accepted → cancelled
STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
SERVICE_REQUEST_STATUSES: List[Tuple[str, str]] = [
    (STATUS_PENDING, "Aguardando"),
    (STATUS_ACCEPTED, "Aceito"),
    (STATUS_COMPLETED, "Concluído"),
    (STATUS_CANCELLED, "Cancelado"),
]

_STATE_CODES = {code for code, _ in STATES}
_URGENCY_CODES = {code for code, _ in URGENCY_LEVELS}
_STATUS_CODES = {code for code, _ in SERVICE_REQUEST_STATUSES}
_NON_DIGITS = re.compile(r"\D")


def is_valid_state(uf: str) -> bool:
    return uf in _STATE_CODES


def cities_for_state(uf: str) -> List[str]:
    """Cities offered for a UF; empty for unknown codes."""
    return list(CITIES_BY_STATE.get(uf, []))


def is_valid_city(uf: str, city: str) -> bool:
    return city in CITIES_BY_STATE.get(uf, [])


def is_valid_category(category: str) -> bool:
    return category in PROFESSIONAL_CATEGORIES


def is_valid_urgency(urgency: str) -> bool:
    return urgency in _URGENCY_CODES


def is_valid_status(status: str) -> bool:
    return status in _STATUS_CODES


def normalize_zip_code(raw: str) -> str:
    """
    Normalize a CEP to the NNNNN-NNN mask.

    Accepts "01310100", "01310-100" or "01.310-100"; anything that does not
    carry exactly eight digits raises ValueError.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) != 8:
        raise ValueError("Zip code must contain exactly 8 digits")
    return f"{digits[:5]}-{digits[5:]}"


def normalize_phone(raw: str) -> str:
    """Strip formatting from a phone number; DDD + 8 or 9 digits required."""
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) not in (10, 11):
        raise ValueError("Phone must contain 10 or 11 digits including area code")
    return digits
