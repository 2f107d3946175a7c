"""I/O tableurs : chargement de la grille brute et export (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any

import pandas as pd

from defautcode.config import DefautCodeError

CSV_DELIMITERS = [",", ";", "\t", "|"]


class ExcelFileError(DefautCodeError):
    """Erreur de chargement d'un fichier (fichier absent, illisible, feuille inexistante)."""


def _get_engine(suffix: str) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix in (".ods", ".odt"):
        return "odf"
    return None


def _missing_engine_error(suffix: str, source: Any, e: ImportError) -> ExcelFileError:
    if suffix == ".xls":
        return ExcelFileError(f"Format .xls requis: pip install xlrd. Détail: {e}")
    if suffix in (".ods", ".odt"):
        return ExcelFileError(f"Format ODS requis: pip install odfpy. Détail: {e}")
    return ExcelFileError(f"Impossible de lire {source}: {e}")


def _detect_csv_delimiter(text: str) -> str:
    sample_lines = [line for line in text.splitlines() if line.strip()][:5]
    if not sample_lines:
        return ","
    try:
        return csv.Sniffer().sniff("\n".join(sample_lines), delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in CSV_DELIMITERS}
        best = max(counts, key=counts.get)  # type: ignore[arg-type]
        return best if counts[best] > 0 else ","


def _decode(payload: bytes) -> str:
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        return payload.decode("latin-1")


def _frame_to_grid(df: pd.DataFrame) -> list[list[str]]:
    """DataFrame sans en-tête -> liste de lignes de texte, cellules vides = ""."""
    return df.fillna("").astype(str).values.tolist()


def _read_csv_grid(payload: bytes, source: Any) -> list[list[str]]:
    text = _decode(payload)
    delimiter = _detect_csv_delimiter(text)
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines="warn",
        )
    except Exception as e:
        raise ExcelFileError(f"Erreur CSV {source}: {e}. Vérifiez le séparateur.") from e
    return _frame_to_grid(df)


def _read_workbook_grid(handle: Any, suffix: str, source: Any, sheet_name: str | None) -> list[list[str]]:
    engine = _get_engine(suffix)
    try:
        xl = pd.ExcelFile(handle, engine=engine) if engine else pd.ExcelFile(handle)
    except ImportError as e:
        raise _missing_engine_error(suffix, source, e) from e
    except Exception as e:
        raise ExcelFileError(f"Impossible de lire le fichier {source}: {e}") from e

    with xl:
        if not xl.sheet_names:
            raise ExcelFileError(f"Aucune feuille dans {source}")
        if sheet_name is None:
            sheet_name = xl.sheet_names[0]  # type: ignore[assignment]
        elif sheet_name not in xl.sheet_names:
            sheets = [str(s) for s in xl.sheet_names]
            raise ExcelFileError(f"Feuille '{sheet_name}' introuvable dans {source}. Feuilles: {', '.join(sheets)}")
        try:
            df = pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=None)
        except Exception as e:
            raise ExcelFileError(f"Erreur feuille '{sheet_name}' dans {source}: {e}") from e
    return _frame_to_grid(df)


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Raises:
        ExcelFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")
    if path.suffix.lower() == ".csv":
        return ["(données)"]
    engine = _get_engine(path.suffix)
    try:
        xl = pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
        with xl:
            return [str(s) for s in xl.sheet_names]
    except ImportError as e:
        raise _missing_engine_error(path.suffix.lower(), path, e) from e
    except Exception as e:
        raise ExcelFileError(f"Impossible de lire le fichier {path}: {e}") from e


def load_grid(filepath: str | Path, sheet_name: str | None = None) -> list[list[str]]:
    """
    Charge une feuille entière sans interpréter d'en-tête.

    La première ligne du fichier est la ligne 0 de la grille. Les cellules
    vides deviennent "".

    Args:
        filepath: Chemin vers le fichier (.xlsx, .xls, .ods, .csv).
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.

    Raises:
        ExcelFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")
    if path.suffix.lower() == ".csv":
        try:
            payload = path.read_bytes()
        except OSError as e:
            raise ExcelFileError(f"Impossible de lire {path}: {e}") from e
        return _read_csv_grid(payload, path)
    return _read_workbook_grid(path, path.suffix, path, sheet_name)


def load_grid_bytes(payload: bytes, file_name: str, sheet_name: str | None = None) -> list[list[str]]:
    """
    Charge la grille d'un fichier reçu en mémoire (upload).

    Le format est déduit de l'extension de `file_name`.
    """
    if not payload:
        raise ExcelFileError(f"Fichier vide: {file_name}")
    suffix = Path(file_name).suffix.lower()
    if suffix == ".csv":
        return _read_csv_grid(payload, file_name)
    return _read_workbook_grid(io.BytesIO(payload), suffix, file_name, sheet_name)


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    header: bool = True,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuilles à 31 caractères
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index, header=header)
