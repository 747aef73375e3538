import logging
import os

import flet as ft

from spcoder.state.form_state import FormState
from spcoder.ui.views.calculator_view import build_calculator_view


def main(page: ft.Page) -> None:
    page.title = "SP Code Calculator"
    page.views.clear()
    page.views.append(build_calculator_view(page, FormState()))
    page.update()


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    web_mode = os.getenv("SPCODER_WEB", "0") == "1"
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if web_mode else ft.AppView.FLET_APP,
        port=int(os.getenv("PORT", "8550")),
    )


if __name__ == "__main__":
    run()
