"""
Wires the CRM screens together:
 1. Build one Directory client from settings
 2. Hand it to the list coordinator and the editor
 3. Make editor saves refresh the list
Running the module prints one page of customers.
"""

import asyncio
import sys
from dataclasses import dataclass
from typing import List, Optional

from crm.api_client import DirectoryAPIClient
from crm.config import CRMSettings, get_settings
from crm.editor import CustomerEditor
from crm.list_coordinator import ConfirmDelete, CustomerListCoordinator
from crm.log import configure_logging
from crm.row_formatter import CustomerRowFormatter


@dataclass
class CRMConsole:
    client: DirectoryAPIClient
    customers: CustomerListCoordinator
    editor: CustomerEditor
    formatter: CustomerRowFormatter


def build_console(
    settings: Optional[CRMSettings] = None,
    session=None,
    confirm_delete: Optional[ConfirmDelete] = None,
) -> CRMConsole:
    settings = settings or get_settings()
    logger = configure_logging(settings.log_level)

    client = DirectoryAPIClient(
        base_url=settings.api_base_url,
        api_key=settings.api_key,
        session=session,
        timeout=settings.request_timeout,
        logger=logger.getChild("directory"),
    )
    customers = CustomerListCoordinator(
        client,
        page_size=settings.page_size,
        sort_key=settings.sort_by,
        debounce_seconds=settings.search_debounce_seconds,
        confirm_delete=confirm_delete,
        logger=logger.getChild("customers"),
    )
    editor = CustomerEditor(
        client,
        on_saved=customers.refresh,
        password_factory=lambda draft: settings.default_password,
        logger=logger.getChild("editor"),
    )
    return CRMConsole(
        client=client,
        customers=customers,
        editor=editor,
        formatter=CustomerRowFormatter(logger=logger.getChild("rows")),
    )


async def show_customers(console: CRMConsole, search: str = "") -> int:
    logger = console.customers.logger
    if search:
        console.customers.set_search_term(search)
        state = await console.customers.wait_idle()
    else:
        state = await console.customers.refresh()

    if state.error:
        logger.error("Could not load customers: %s", state.error)
        return 1

    for row in console.formatter.format_rows(state.records):
        print(
            f"{row['full_name']:<32} {row['username']:<20} {row['email']:<36} "
            f"{row['phone']:<16} {row['location']}"
        )
    logger.info(
        "Showing %d of %d customers (page %d)",
        len(state.records),
        state.total,
        state.query.page_index + 1,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    console = build_console()
    return asyncio.run(show_customers(console, " ".join(argv)))


if __name__ == "__main__":
    sys.exit(main())
