"""
lcms_ingestion -- reading and writing curated standard ion tables.

Source adapters turn TSV files into row dicts; LoadService owns the single
transaction a load runs in; ExportService writes the editable table back out.
"""
