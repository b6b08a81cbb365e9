"""Screen controllers. Each one turns backend calls into form or view state."""

from psicocompany.screens.login import LoginScreen
from psicocompany.screens.navigation import NavigationScreen
from psicocompany.screens.profile import ProfileScreen
from psicocompany.screens.signup import SignupScreen
from psicocompany.screens.therapists import TherapistsScreen

__all__ = [
    "LoginScreen",
    "NavigationScreen",
    "ProfileScreen",
    "SignupScreen",
    "TherapistsScreen",
]
