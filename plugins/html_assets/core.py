"""
The pipeline which turns a compilation into one emitted HTML document.

Each stage hands a new `RenderContext` to the next one; hook listeners may
replace any field of the payload they get before it moves on:

    extract assets        -> before_asset_tag_generation
    generate tags         -> alter_asset_tags
    group head/body tags  -> alter_asset_tag_groups
    execute template      -> after_template_execution
    inject tags           -> before_emit
    emit                  -> after_emit
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from .asset_extractor import AssetBundle, Compilation, get_assets_from_compilation
from .hooks import HtmlAssetsHooks
from .options import HtmlAssetsOptions
from .render_html import (
    TemplateFunction,
    inject_manifest,
    inject_tags_into_html,
    minify_html,
    render_html,
)
from .tag_generators import (
    AssetTags,
    TagGroups,
    generate_asset_groups,
    generate_favicon_tags,
    generate_meta_tags,
    generate_script_tags,
    generate_style_tags,
)

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")


@dataclass(frozen=True)
class RenderContext:
    output_name: str
    assets: Optional[AssetBundle] = None
    asset_tags: Optional[AssetTags] = None
    tag_groups: Optional[TagGroups] = None
    html: Optional[str] = None


@dataclass
class OutputJob:
    """One HTML file to generate."""

    output_name: str
    options: HtmlAssetsOptions
    template_function: TemplateFunction


def get_template_parameters(
    compilation: Compilation,
    assets: AssetBundle,
    tag_groups: TagGroups,
    options: HtmlAssetsOptions,
) -> Dict[str, Any]:
    """Values handed to the template.

    `template_parameters` may disable them (False), compute them (callable with
    the same arguments as this function) or extend the defaults (mapping).
    """
    custom = options.template_parameters
    if custom is False:
        return {}
    if callable(custom):
        return custom(compilation, assets, tag_groups, options)

    parameters: Dict[str, Any] = {
        "compilation": compilation,
        "html_assets_plugin": {
            "tags": {"head_tags": tag_groups.head_tags, "body_tags": tag_groups.body_tags},
            "files": assets.as_dict(),
            "options": options,
        },
    }
    if custom:
        parameters.update(custom)
    return parameters


async def generate_html(
    compilation: Compilation,
    hooks: HtmlAssetsHooks,
    output_name: str,
    options: HtmlAssetsOptions,
    template_function: TemplateFunction,
    plugin: Any = None,
) -> RenderContext:
    """Run every stage for `output_name` and emit the result into the compilation."""
    ctx = RenderContext(output_name=output_name)

    payload = await hooks.before_asset_tag_generation.call({
        "assets": get_assets_from_compilation(compilation, options, output_name),
        "output_name": output_name,
        "plugin": plugin,
    })
    ctx = replace(ctx, assets=payload["assets"])

    asset_tags = AssetTags(
        scripts=generate_script_tags(ctx.assets.js),
        styles=generate_style_tags(ctx.assets.css),
        meta=generate_meta_tags(options.meta),
        favicons=generate_favicon_tags(ctx.assets.favicon),
    )
    payload = await hooks.alter_asset_tags.call({
        "asset_tags": asset_tags,
        "output_name": output_name,
        "plugin": plugin,
    })
    ctx = replace(ctx, asset_tags=payload["asset_tags"])

    groups = generate_asset_groups(ctx.asset_tags, options.script_target)
    payload = await hooks.alter_asset_tag_groups.call({
        "head_tags": groups.head_tags,
        "body_tags": groups.body_tags,
        "output_name": output_name,
        "plugin": plugin,
    })
    ctx = replace(ctx, tag_groups=TagGroups(payload["head_tags"], payload["body_tags"]))

    parameters = get_template_parameters(compilation, ctx.assets, ctx.tag_groups, options)
    ctx = replace(ctx, html=render_html(template_function, parameters))

    payload = await hooks.after_template_execution.call({
        "html": ctx.html,
        "head_tags": ctx.tag_groups.head_tags,
        "body_tags": ctx.tag_groups.body_tags,
        "output_name": output_name,
        "plugin": plugin,
    })
    ctx = replace(
        ctx,
        html=payload["html"],
        tag_groups=TagGroups(payload["head_tags"], payload["body_tags"]),
    )

    html = ctx.html
    if options.inject:
        html = inject_tags_into_html(html, ctx.tag_groups, options.xhtml)
        html = inject_manifest(ctx.assets.manifest, html)
    if options.minify:
        html = minify_html(html, options.minify_opts)

    payload = await hooks.before_emit.call({
        "html": html,
        "output_name": output_name,
        "plugin": plugin,
    })
    ctx = replace(ctx, html=payload["html"])

    compilation.emit_asset(output_name, ctx.html)
    logger.debug("emitted %s (%d chars)", output_name, len(ctx.html))

    await hooks.after_emit.call({"output_name": output_name, "plugin": plugin})
    return ctx


async def generate_all(
    compilation: Compilation,
    hooks: HtmlAssetsHooks,
    jobs: List[OutputJob],
    plugin: Any = None,
) -> List[RenderContext]:
    """Generate several outputs concurrently.

    A failing output does not stop the others; once all of them settled the
    first failure is raised.
    """
    results = await asyncio.gather(
        *(
            generate_html(compilation, hooks, job.output_name, job.options, job.template_function, plugin)
            for job in jobs
        ),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, BaseException)]
    for job, result in zip(jobs, results):
        if isinstance(result, BaseException):
            logger.error("Failed to generate %s: %s", job.output_name, result)
    if errors:
        raise errors[0]
    return list(results)
