"""
Interactive HTML viewer.

Embeds the rendered SVG as a data URI in a standalone page with pan, zoom
and click-to-highlight of a node's neighbours.
"""

import base64
import html

VIEWER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        html, body {{ margin: 0; height: 100%; font-family: sans-serif; }}
        #graph {{ width: 100%; height: 100%; overflow: scroll; }}
        #graph svg {{ transform-origin: 0 0; }}
        #instructions {{
            color: #737373;
            position: fixed;
            font-size: 8pt;
            bottom: 0;
            left: 4px;
        }}
        .dimmed {{ opacity: 0.15; }}
    </style>
</head>
<body>
    <h4 id="instructions">Click node to highlight; Ctrl-scroll to zoom; Esc to unhighlight</h4>
    <div id="graph"></div>
    <script>
        const SVG_URL = "{svg_url}";
        const container = document.getElementById("graph");
        let scale = 1;

        fetch(SVG_URL).then(r => r.text()).then(text => {{
            container.innerHTML = text;
            const svg = container.querySelector("svg");
            const nodes = Array.from(svg.querySelectorAll("g.node"));
            const edges = Array.from(svg.querySelectorAll("g.edge"));
            const titleOf = el => (el.querySelector("title") || {{}}).textContent || "";

            function reset() {{
                svg.querySelectorAll(".dimmed").forEach(el => el.classList.remove("dimmed"));
            }}

            nodes.forEach(node => node.addEventListener("click", () => {{
                reset();
                const id = titleOf(node);
                const linked = new Set([id]);
                edges.forEach(edge => {{
                    const [tail, head] = titleOf(edge).split("->");
                    if (tail === id || head === id) {{
                        linked.add(tail);
                        linked.add(head);
                    }} else {{
                        edge.classList.add("dimmed");
                    }}
                }});
                nodes.forEach(n => {{ if (!linked.has(titleOf(n))) n.classList.add("dimmed"); }});
            }}));

            document.addEventListener("keydown", evt => {{ if (evt.key === "Escape") reset(); }});
            container.addEventListener("wheel", evt => {{
                if (!evt.ctrlKey) return;
                evt.preventDefault();
                scale = Math.max(0.1, scale * (evt.deltaY < 0 ? 1.1 : 0.9));
                svg.style.transform = `scale(${{scale}})`;
            }}, {{ passive: false }});
        }});
    </script>
</body>
</html>
"""


def svg_data_uri(svg_text: str) -> str:
    encoded = base64.b64encode(svg_text.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def interactive_html(svg_text: str, title: str = "statsgraph") -> str:
    """Build the viewer page for a rendered SVG."""
    return VIEWER_TEMPLATE.format(title=html.escape(title), svg_url=svg_data_uri(svg_text))
