"""
User-facing (pt-BR) messages and backend error mapping.
"""

from __future__ import annotations

from psicocompany.exceptions import BackendError

FORM_HAS_ERRORS = "Por favor, corrija os erros no formulário"
UNEXPECTED_ERROR = "Ocorreu um erro inesperado. Tente novamente."
SIGNUP_SUCCESS = "Conta criada com sucesso! Redirecionando..."
SIGNUP_FAILED = "Erro ao criar conta"
LOGIN_SUCCESS = "Bem-vindo de volta!"
LOGIN_INVALID = "E-mail ou senha inválidos"
LOGOUT_SUCCESS = "Você saiu da sua conta"
LOGIN_REQUIRED = "Faça login"
PROFILE_SAVED = "Salvo!"
THERAPISTS_UNAVAILABLE = "Não foi possível carregar os psicólogos"

# Substring of the backend message -> what the user sees.
_SIGNUP_ERRORS = (
    ("already registered", "Este e-mail já está cadastrado"),
    ("invalid", "Dados inválidos. Verifique as informações"),
    ("weak", "Senha muito fraca. Use uma senha mais forte"),
)


def signup_error_message(error: BackendError) -> str:
    message = error.message or ""
    for needle, friendly in _SIGNUP_ERRORS:
        if needle in message:
            return friendly
    return message or SIGNUP_FAILED


def login_error_message(error: BackendError) -> str:
    if error.code == "invalid_credentials" or "Invalid login" in (error.message or ""):
        return LOGIN_INVALID
    return error.message or UNEXPECTED_ERROR
