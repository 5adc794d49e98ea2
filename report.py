import json

import markdown

from model import AnalysisReport

FORMATS = {
    'json': 'json',
    'markdown': 'md',
    'html': 'html',
}


def extension(output_format: str) -> str:
    if output_format in FORMATS:
        return FORMATS[output_format]
    else:
        raise ValueError(f"Unsupported report format: {output_format}")


def render_json(report: AnalysisReport) -> str:
    return json.dumps(report.to_dict(), indent=4, ensure_ascii=False)


def render_markdown(report: AnalysisReport) -> str:
    """
    Summarize a report as a markdown document with one table row per compared pair
    """
    lines = [
        "# Plagiarism report",
        "",
        f"- Documents: {report.total_documents}",
        f"- Comparisons: {report.total_comparisons}",
        f"- Threshold: {report.threshold * 100:.0f}%",
        f"- Flagged pairs: {len(report.plagiarized)}",
        f"- Created: {report.timestamp}",
        "",
        "| Document 1 | Document 2 | Jaccard | Cosine | Overlap | Dice | Level | Plagiarized |",
        "|---|---|---|---|---|---|---|---|",
    ]
    for r in report.results:
        s = r.similarity
        lines.append(
            f"| {_escape(r.doc1.name)} | {_escape(r.doc2.name)} "
            f"| {r.similarity_percentage:.2f}% | {s.cosine_similarity * 100:.2f}% "
            f"| {s.overlap_coefficient * 100:.2f}% | {s.dice_coefficient * 100:.2f}% "
            f"| {r.classification.label} | {'yes' if r.is_plagiarized else 'no'} |"
        )
    return "\n".join(lines) + "\n"


def render_html(report: AnalysisReport) -> str:
    return markdown.markdown(render_markdown(report), extensions=['tables'])


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


RENDERERS = {
    'json': render_json,
    'markdown': render_markdown,
    'html': render_html,
}


def write_report(report: AnalysisReport, output_file: str, output_format: str = 'json'):
    """
    Render a report in the given format and write it to a file
    :param report: The analysis report
    :param output_file: Path of the file to write
    :param output_format: json, markdown or html
    """
    if output_format not in RENDERERS:
        raise ValueError(f"Unsupported report format: {output_format}")

    content = RENDERERS[output_format](report)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
