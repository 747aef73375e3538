from typing import Dict, List, Optional
import flet as ft

from spcoder.core.modules import ModuleValidationError
from spcoder.core.optimizer import OptimizerError
from spcoder.core.ranking import BETTER, WORSE
from spcoder.services.calculation_service import CalculationService, SemesterReport
from spcoder.services.catalog_service import CatalogEntry, CatalogService, CatalogServiceError
from spcoder.state.form_state import FormState, ModuleRow

SEARCH_LIMIT = 50

STATUS_COLORS = {
    BETTER: ft.Colors.GREEN_400,
    WORSE: ft.Colors.RED_400,
}


def _code_chip(text: str) -> ft.Container:
    return ft.Container(
        content=ft.Text(text, weight=ft.FontWeight.BOLD),
        padding=ft.padding.symmetric(horizontal=8, vertical=2),
        border_radius=4,
        bgcolor=ft.Colors.BLUE_GREY_100,
    )


def _build_semester_results(report: SemesterReport) -> ft.Column:
    controls: List[ft.Control] = [ft.Text(report.title, size=20, weight=ft.FontWeight.BOLD)]
    if report.is_empty:
        controls.append(ft.Text("No modules entered."))
        return ft.Column(controls=controls, spacing=6)

    for row in report.rows:
        removed = [_code_chip(code) for code in row.remove] or [_code_chip("nothing")]
        controls.append(
            ft.Row(
                controls=[
                    ft.Column(controls=[ft.Text("By SP coding"), ft.Row(controls=removed, wrap=True)], expand=True),
                    ft.Text("your grade becomes"),
                    ft.Text(
                        f"{row.rounded:g}",
                        size=18,
                        weight=ft.FontWeight.BOLD,
                        color=STATUS_COLORS.get(row.status),
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            )
        )
    return ft.Column(controls=controls, spacing=6)


def build_calculator_view(page: ft.Page, form: FormState) -> ft.View:
    catalog = CatalogService.from_settings()
    calculator = CalculationService.from_settings()

    warning = ft.Text(color=ft.Colors.RED_400, visible=False)
    rows_column = ft.Column(spacing=8)
    results_column = ft.Column(spacing=16)
    search = ft.TextField(label="Search modules", width=420)
    search_results = ft.ListView(height=220, spacing=2, visible=False)

    active_row: Dict[str, Optional[int]] = {"id": None}

    def set_warning(message: Optional[str]) -> None:
        if message:
            form.warn(message)
        else:
            form.unwarn()
        warning.value = form.warning or ""
        warning.visible = form.warning is not None

    def on_pick(entry: CatalogEntry) -> None:
        row_id = active_row["id"]
        if row_id is None:
            return
        form.apply_catalog_entry(row_id, entry)
        search_results.visible = False
        render_rows()
        page.update()

    def refresh_search(query: str) -> None:
        try:
            entries = catalog.search(query)
        except CatalogServiceError as exc:
            set_warning(str(exc))
            page.update()
            return

        search_results.controls = [
            ft.ListTile(
                title=ft.Text(entry.title),
                leading=ft.Text(entry.code, weight=ft.FontWeight.BOLD),
                on_click=lambda _, e=entry: on_pick(e),
            )
            for entry in entries[:SEARCH_LIMIT]
        ]
        search_results.visible = active_row["id"] is not None
        page.update()

    def bind_row(row: ModuleRow) -> ft.Row:
        code = ft.TextField(label="Module", value=row.module_code, width=160)
        credits = ft.TextField(label="Credits", value=row.credits, width=100)
        grade = ft.TextField(label="Grade", value=row.grade, width=100)
        semester = ft.RadioGroup(
            value=row.semester,
            content=ft.Row(controls=[ft.Radio(value="sem1", label="S1"), ft.Radio(value="sem2", label="S2")]),
        )

        def on_focus(_):
            active_row["id"] = row.id
            refresh_search(search.value or "")

        def on_code(e):
            row.module_code = e.control.value or ""
            search.value = row.module_code
            refresh_search(row.module_code)

        def on_credits(e):
            row.credits = e.control.value or ""

        def on_grade(e):
            row.grade = e.control.value or ""

        def on_semester(e):
            row.semester = e.control.value or "sem1"

        def on_remove(_):
            form.remove_row(row.id)
            if active_row["id"] == row.id:
                active_row["id"] = None
                search_results.visible = False
            render_rows()
            page.update()

        code.on_focus = on_focus
        code.on_change = on_code
        credits.on_change = on_credits
        grade.on_change = on_grade
        semester.on_change = on_semester

        return ft.Row(
            controls=[
                code,
                credits,
                grade,
                semester,
                ft.IconButton(icon=ft.Icons.DELETE, on_click=on_remove),
            ]
        )

    def render_rows() -> None:
        rows_column.controls = [bind_row(row) for row in form.rows]

    def on_add(_):
        form.add_row()
        render_rows()
        page.update()

    def on_submit(_):
        try:
            report = calculator.calculate_rows(form.to_raw_rows())
        except (ModuleValidationError, OptimizerError) as exc:
            set_warning(str(exc))
            page.update()
            return

        set_warning(None)
        results_column.controls = [_build_semester_results(s) for s in report.semesters]
        page.update()

    search.on_change = lambda e: refresh_search(e.control.value or "")

    if not form.rows:
        form.add_row()
    render_rows()

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text("SP Code Calculator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Modules", size=22, weight=ft.FontWeight.BOLD),
                        rows_column,
                        ft.Row(
                            controls=[
                                ft.Button("Add Module", on_click=on_add),
                                ft.Button("Calculate", on_click=on_submit),
                            ]
                        ),
                        warning,
                        search,
                        search_results,
                        ft.Divider(),
                        results_column,
                    ],
                ),
            ),
        ],
    )
