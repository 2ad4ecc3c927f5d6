"""Abbreviation dictionaries for the short naming strategy."""

import json
import logging
from pathlib import Path

import yaml

from dbtbl.errors import ConfigError

logger = logging.getLogger(__name__)

ENGLISH: dict[str, str] = {
    "account": "acct",
    "accounts": "accts",
    "address": "addr",
    "addresses": "addrs",
    "administrator": "admin",
    "administrators": "admins",
    "application": "app",
    "applications": "apps",
    "attachment": "attach",
    "attachments": "attachs",
    "attribute": "attr",
    "attributes": "attrs",
    "authentication": "auth",
    "authorization": "authz",
    "category": "cat",
    "categories": "cats",
    "configuration": "cfg",
    "configurations": "cfgs",
    "customer": "cust",
    "customers": "custs",
    "department": "dept",
    "departments": "depts",
    "description": "desc",
    "document": "doc",
    "documents": "docs",
    "employee": "emp",
    "employees": "emps",
    "information": "info",
    "inventory": "inv",
    "invoice": "inv",
    "invoices": "invs",
    "message": "msg",
    "messages": "msgs",
    "notification": "notif",
    "notifications": "notifs",
    "number": "num",
    "order": "ord",
    "orders": "ords",
    "organization": "org",
    "organizations": "orgs",
    "parameter": "param",
    "parameters": "params",
    "payment": "pmt",
    "payments": "pmts",
    "permission": "perm",
    "permissions": "perms",
    "preference": "pref",
    "preferences": "prefs",
    "product": "prod",
    "products": "prods",
    "quantity": "qty",
    "reference": "ref",
    "references": "refs",
    "registration": "reg",
    "relationship": "rel",
    "relationships": "rels",
    "repository": "repo",
    "request": "req",
    "requests": "reqs",
    "response": "resp",
    "responses": "resps",
    "schedule": "sched",
    "schedules": "scheds",
    "session": "sess",
    "sessions": "sess",
    "setting": "set",
    "settings": "sets",
    "statistic": "stat",
    "statistics": "stats",
    "subscription": "sub",
    "subscriptions": "subs",
    "temporary": "tmp",
    "transaction": "txn",
    "transactions": "txns",
    "user": "usr",
    "users": "usrs",
    "warehouse": "whs",
    "warehouses": "whs",
}

PORTUGUESE: dict[str, str] = {
    "cadastro": "cad",
    "cadastros": "cads",
    "categoria": "cat",
    "categorias": "cats",
    "cliente": "cli",
    "clientes": "clis",
    "configuracao": "cfg",
    "configuracoes": "cfgs",
    "departamento": "depto",
    "departamentos": "deptos",
    "descricao": "desc",
    "documento": "doc",
    "documentos": "docs",
    "empresa": "emp",
    "empresas": "emps",
    "endereco": "end",
    "enderecos": "ends",
    "estoque": "estq",
    "financeiro": "fin",
    "fornecedor": "forn",
    "fornecedores": "forns",
    "funcionario": "func",
    "funcionarios": "funcs",
    "lancamento": "lanc",
    "lancamentos": "lancs",
    "movimentacao": "mov",
    "movimentacoes": "movs",
    "notificacao": "notif",
    "notificacoes": "notifs",
    "numero": "num",
    "pagamento": "pgto",
    "pagamentos": "pgtos",
    "parametro": "param",
    "parametros": "params",
    "pedido": "ped",
    "pedidos": "peds",
    "permissao": "perm",
    "permissoes": "perms",
    "produto": "prod",
    "produtos": "prods",
    "quantidade": "qtd",
    "usuario": "usr",
    "usuarios": "usrs",
    "venda": "vnd",
    "vendas": "vnds",
}

SPANISH: dict[str, str] = {
    "categoria": "cat",
    "categorias": "cats",
    "cliente": "cli",
    "clientes": "clis",
    "configuracion": "cfg",
    "configuraciones": "cfgs",
    "departamento": "depto",
    "departamentos": "deptos",
    "descripcion": "desc",
    "direccion": "dir",
    "direcciones": "dirs",
    "documento": "doc",
    "documentos": "docs",
    "empleado": "emp",
    "empleados": "emps",
    "empresa": "empr",
    "empresas": "emprs",
    "factura": "fact",
    "facturas": "facts",
    "inventario": "inv",
    "notificacion": "notif",
    "notificaciones": "notifs",
    "numero": "num",
    "pago": "pgo",
    "pagos": "pgos",
    "parametro": "param",
    "parametros": "params",
    "pedido": "ped",
    "pedidos": "peds",
    "permiso": "perm",
    "permisos": "perms",
    "producto": "prod",
    "productos": "prods",
    "proveedor": "prov",
    "proveedores": "provs",
    "cantidad": "cant",
    "usuario": "usr",
    "usuarios": "usrs",
    "venta": "vta",
    "ventas": "vtas",
}

BUILTIN_DICTIONARIES: dict[str, dict[str, str]] = {
    "en": ENGLISH,
    "pt": PORTUGUESE,
    "es": SPANISH,
}


def load_custom_dictionary(path: str | Path) -> dict[str, str]:
    """Load a word to abbreviation mapping from a YAML or JSON file.

    Args:
        path: Dictionary file

    Returns:
        Mapping with lowercased keys

    Raises:
        ConfigError: If the file is missing, unparsable or not a flat mapping
    """
    dictionary_path = Path(path)
    if not dictionary_path.is_file():
        raise ConfigError(f"Abbreviation dictionary not found: {dictionary_path}")

    try:
        text = dictionary_path.read_text(encoding="utf-8")
        data = json.loads(text) if dictionary_path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid abbreviation dictionary {dictionary_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Abbreviation dictionary {dictionary_path} must be a mapping of word to abbreviation")

    return {str(word).lower(): str(abbreviation) for word, abbreviation in data.items()}


def load_dictionary(lang: str, custom_path: str | Path | None = None) -> dict[str, str]:
    """Build the abbreviation dictionary for a language.

    "all" merges every built-in dictionary in a fixed order (en, pt, es), so
    a word present in more than one keeps its English abbreviation. Entries
    from a custom file override the built-ins.

    Args:
        lang: Language code (en, pt, es or all)
        custom_path: Optional custom dictionary file

    Returns:
        Mapping of lowercase word to abbreviation

    Raises:
        ConfigError: If the language is unknown or the custom file is invalid
    """
    lang = lang.lower()

    dictionary: dict[str, str] = {}
    if lang == "all":
        for builtin in reversed(list(BUILTIN_DICTIONARIES.values())):
            dictionary.update(builtin)
    elif lang in BUILTIN_DICTIONARIES:
        dictionary.update(BUILTIN_DICTIONARIES[lang])
    else:
        allowed = ", ".join([*BUILTIN_DICTIONARIES, "all"])
        raise ConfigError(f"Unknown dictionary language '{lang}'. Allowed values: {allowed}")

    if custom_path:
        custom = load_custom_dictionary(custom_path)
        logger.debug(f"Loaded {len(custom)} custom abbreviations from {custom_path}")
        dictionary.update(custom)

    return dictionary
