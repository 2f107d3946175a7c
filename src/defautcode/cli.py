"""Interface en ligne de commande DefautCode."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from defautcode import __version__
from defautcode.config import Config, DefautCodeError
from defautcode.history import HistoryStore
from defautcode.io_excel import load_grid, save_xlsx
from defautcode.report import build_report_df, build_results_df, print_results_console
from defautcode.service import DefautSearchService, validate_code
from defautcode.summary import OpenAISummaryGenerator, SummaryError

logger = logging.getLogger("defautcode")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


def _load_config(config_path: str | None) -> Config:
    return Config.load(config_path) if config_path else Config()


def _history(config: Config, history_path: str | None) -> HistoryStore | None:
    path = history_path or config.history_db
    return HistoryStore(path) if path else None


def cmd_search(
    file: str,
    code: str,
    *,
    config_path: str | None = None,
    output_path: str | None = None,
    sheet_name: str | None = None,
    summary: bool = False,
    history_path: str | None = None,
    user_id: int = 0,
) -> int:
    """Recherche un code défaut dans un fichier de tickets."""
    config = _load_config(config_path)
    history = _history(config, history_path)

    summarizer = None
    if summary or config.summary_enabled:
        try:
            summarizer = OpenAISummaryGenerator(config.summary_model, max_matches=config.summary_max_matches)
        except SummaryError as e:
            print(f"Avertissement: résumé désactivé ({e})")

    service = DefautSearchService(config, summarizer=summarizer, history=history)
    validate_code(code)
    path = Path(file)
    grid = load_grid(path, sheet_name)
    record = service.register_grid(grid, path.name, str(path.resolve()), user_id)
    response = service.search(grid, code, user_id=user_id, file_id=record.id)
    print_results_console(response)

    if output_path:
        sheets = {
            "Résultats": build_results_df(response.results),
            "REPORT": build_report_df(response, config, source=str(Path(file).name)),
        }
        save_xlsx(output_path, sheets)
        print(f"Fichier de sortie: {output_path}")

    return 0


def cmd_upload(file: str, history_path: str, user_id: int, sheet_name: str | None = None) -> int:
    """Enregistre un fichier de tickets dans l'historique sans lancer de recherche."""
    service = DefautSearchService(history=HistoryStore(history_path))
    path = Path(file)
    record = service.register_grid(load_grid(path, sheet_name), path.name, str(path.resolve()), user_id)
    print(f"Fichier enregistré: [{record.id}] {record.file_name} - {record.row_count} lignes")
    return 0


def cmd_files(history_path: str, user_id: int) -> int:
    """Liste les fichiers enregistrés pour un utilisateur."""
    files = HistoryStore(history_path).list_files(user_id)
    if not files:
        print("Aucun fichier enregistré.")
        return 0
    print(f"Fichiers de l'utilisateur {user_id}:")
    for f in files:
        print(f"  [{f.id}] {f.file_name} - {f.row_count} lignes - {f.created_at}")
    return 0


def cmd_history(history_path: str, user_id: int, limit: int) -> int:
    """Affiche les dernières recherches d'un utilisateur."""
    searches = HistoryStore(history_path).list_searches(user_id, limit)
    if not searches:
        print("Aucune recherche enregistrée.")
        return 0
    for s in searches:
        print(f"  [{s.id}] {s.search_code} - {len(s.results)} résultat(s) - fichier #{s.excel_file_id} - {s.created_at}")
        if s.ai_summary:
            print(f"      {s.ai_summary}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="defautcode",
        description="Recherche de solutions par code défaut dans un tableur de tickets hotline",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    p_search = subparsers.add_parser("search", help="Rechercher un code défaut")
    p_search.add_argument("file", help="Fichier tableur (.xlsx, .xls, .ods, .csv)")
    p_search.add_argument("code", help="Code défaut (ex. P20EE)")
    p_search.add_argument("--config", "-c", help="Fichier config JSON")
    p_search.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_search.add_argument("--sheet", help="Feuille à lire (défaut: première)")
    p_search.add_argument("--summary", action="store_true", help="Générer un résumé (OPENAI_API_KEY requis)")
    p_search.add_argument("--history", help="Base DuckDB d'historique")
    p_search.add_argument("--user", type=int, default=0, help="Identifiant utilisateur")

    p_upload = subparsers.add_parser("upload", help="Enregistrer un fichier sans recherche")
    p_upload.add_argument("file", help="Fichier tableur (.xlsx, .xls, .ods, .csv)")
    p_upload.add_argument("--sheet", help="Feuille à lire (défaut: première)")
    p_upload.add_argument("--history", required=True, help="Base DuckDB d'historique")
    p_upload.add_argument("--user", type=int, default=0, help="Identifiant utilisateur")

    p_files = subparsers.add_parser("files", help="Lister les fichiers enregistrés")
    p_files.add_argument("--history", required=True, help="Base DuckDB d'historique")
    p_files.add_argument("--user", type=int, default=0, help="Identifiant utilisateur")

    p_hist = subparsers.add_parser("history", help="Afficher les dernières recherches")
    p_hist.add_argument("--history", required=True, help="Base DuckDB d'historique")
    p_hist.add_argument("--user", type=int, default=0, help="Identifiant utilisateur")
    p_hist.add_argument("--limit", type=int, default=20, help="Nombre de recherches affichées")

    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        if args.command == "search":
            return cmd_search(
                args.file,
                args.code,
                config_path=args.config,
                output_path=args.output,
                sheet_name=args.sheet,
                summary=args.summary,
                history_path=args.history,
                user_id=args.user,
            )
        if args.command == "upload":
            return cmd_upload(args.file, args.history, args.user, args.sheet)
        if args.command == "files":
            return cmd_files(args.history, args.user)
        if args.command == "history":
            return cmd_history(args.history, args.user, args.limit)
    except DefautCodeError as e:
        logger.debug("Commande %s interrompue", args.command, exc_info=True)
        print(f"Erreur: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
