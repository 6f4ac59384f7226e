"""JavaScript / TypeScript adapter — package.json."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from stackscan.adapters._io import as_table, load_json, section_table
from stackscan.models import (
    DetectedStack,
    FilePatterns,
    FrameworkInfo,
    ManifestResult,
    StructureFacts,
)
from stackscan.patterns import get_file_patterns
from stackscan.registry import register_adapter
from stackscan.rules import FrameworkRule, Rule, RuleTable, classify, detect_framework
from stackscan.versions import normalize_version

log = structlog.get_logger(__name__)

# Lockfile -> package manager, checked in order when package.json has no
# "packageManager" field
_LOCKFILES: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("package-lock.json", "npm"),
)

_RADIX_PRIMITIVES = (
    "@radix-ui/react-slot",
    "@radix-ui/react-dialog",
    "@radix-ui/react-dropdown-menu",
    "@radix-ui/react-separator",
    "@radix-ui/react-popover",
    "@radix-ui/react-tooltip",
    "@radix-ui/react-select",
    "@radix-ui/react-label",
)


def _is_shadcn(all_deps: Mapping[str, str], facts: StructureFacts) -> bool:
    # Radix primitives alone are just radix; shadcn/ui copies components that
    # pair them with tailwind + class-variance-authority into the repo.
    return (
        any(p in all_deps for p in _RADIX_PRIMITIVES)
        and "tailwindcss" in all_deps
        and "class-variance-authority" in all_deps
        and facts.has_components_dir
    )


def _next_variant(_deps: Mapping[str, str], facts: StructureFacts) -> str:
    if facts.has_app_dir:
        return "app-router"
    if facts.has_pages_dir:
        return "pages-router"
    return "unknown"


FRAMEWORKS: tuple[FrameworkRule, ...] = (
    FrameworkRule(("next",), "next", variant=_next_variant),
    FrameworkRule(("nuxt",), "nuxt"),
    FrameworkRule(("@remix-run/react", "@remix-run/node"), "remix"),
    FrameworkRule(("astro",), "astro"),
    FrameworkRule(("@sveltejs/kit",), "sveltekit"),
    FrameworkRule(("@solidjs/start",), "solid-start"),
    FrameworkRule(("@nestjs/core",), "nest"),
    FrameworkRule(("vite", "react"), "vite-react", requires_all=True),
    FrameworkRule(("express",), "express"),
    FrameworkRule(("fastify",), "fastify"),
    FrameworkRule(("hono",), "hono"),
    FrameworkRule(("@angular/core",), "angular"),
    FrameworkRule(("vue",), "vue"),
    FrameworkRule(("svelte",), "svelte"),
    FrameworkRule(("react",), "react"),
)

FRAMEWORK_PACKAGES = frozenset(
    {
        "next",
        "nuxt",
        "@remix-run/react",
        "@remix-run/node",
        "@remix-run/dev",
        "astro",
        "@sveltejs/kit",
        "@solidjs/start",
        "@nestjs/core",
        "@nestjs/common",
        "express",
        "fastify",
        "hono",
        "@angular/core",
        "vue",
        "svelte",
        "react",
        "react-dom",
    }
)

RULES: tuple[Rule, ...] = (
    # ===== ORM / Database =====
    Rule(("prisma", "@prisma/client"), "prisma", "orm"),
    Rule(("drizzle-orm", "drizzle-kit"), "drizzle", "orm"),
    Rule(("typeorm",), "typeorm", "orm"),
    Rule(("kysely",), "kysely", "orm"),
    Rule(("mongoose",), "mongoose", "orm"),
    Rule(("sequelize",), "sequelize", "orm"),
    Rule(("@neondatabase/serverless",), "neon", "database"),
    Rule(("libsql", "@libsql/client"), "libsql", "database"),
    Rule(("better-sqlite3",), "better-sqlite3", "database"),
    Rule(("pg", "postgres"), "postgres", "database"),
    Rule(("mysql2",), "mysql", "database"),
    Rule(("mongodb",), "mongodb", "database"),
    Rule(("@supabase/supabase-js",), "supabase", "database"),
    Rule(("ioredis", "redis", "@upstash/redis"), "redis", "database"),
    # ===== Auth =====
    Rule(("next-auth", "@auth/core"), "next-auth", "auth"),
    Rule(("@clerk/nextjs", "@clerk/clerk-sdk-node", "@clerk/clerk-react"), "clerk", "auth"),
    Rule(("lucia", "@lucia-auth/adapter-prisma"), "lucia", "auth"),
    Rule(("@supabase/auth-helpers-nextjs", "@supabase/ssr"), "supabase-auth", "auth"),
    Rule(("passport",), "passport", "auth"),
    Rule(("better-auth",), "better-auth", "auth"),
    Rule(("@kinde-oss/kinde-auth-nextjs",), "kinde", "auth"),
    Rule(("@auth0/nextjs-auth0", "@auth0/auth0-react"), "auth0", "auth"),
    Rule(("firebase-admin", "firebase"), "firebase", "auth"),
    Rule(("jsonwebtoken", "jose"), "jwt", "auth"),
    # ===== Validation =====
    Rule(("zod",), "zod", "validation"),
    Rule(("yup",), "yup", "validation"),
    Rule(("joi",), "joi", "validation"),
    Rule(("valibot",), "valibot", "validation"),
    Rule(("arktype",), "arktype", "validation"),
    # ===== UI components (before CSS: shadcn claims the radix primitives) =====
    Rule(_RADIX_PRIMITIVES + ("class-variance-authority",), "shadcn", "ui-components", condition=_is_shadcn),
    Rule(_RADIX_PRIMITIVES, "radix", "ui-components"),
    Rule(("@headlessui/react", "@headlessui/vue"), "headless-ui", "ui-components"),
    Rule(("@ark-ui/react",), "ark-ui", "ui-components"),
    # ===== CSS =====
    Rule(("tailwindcss", "@tailwindcss/postcss", "@tailwindcss/vite"), "tailwind", "css"),
    Rule(("@chakra-ui/react",), "chakra", "css"),
    Rule(("@mui/material",), "mui", "css"),
    Rule(("styled-components",), "styled-components", "css"),
    Rule(("@emotion/react", "@emotion/styled"), "emotion", "css"),
    Rule(("@pandacss/dev",), "panda", "css"),
    Rule(("@vanilla-extract/css",), "vanilla-extract", "css"),
    Rule(("unocss",), "unocss", "css"),
    Rule(("sass",), "sass", "css"),
    # ===== Testing =====
    Rule(("vitest",), "vitest", "testing"),
    Rule(("jest", "ts-jest"), "jest", "testing"),
    Rule(("@playwright/test", "playwright"), "playwright", "testing"),
    Rule(("cypress",), "cypress", "testing"),
    Rule(("@testing-library/react", "@testing-library/vue", "@testing-library/jest-dom"), "testing-library", "testing"),
    Rule(("msw",), "msw", "testing"),
    Rule(("supertest",), "supertest", "testing"),
    # ===== State management =====
    Rule(("zustand",), "zustand", "state"),
    Rule(("@reduxjs/toolkit", "redux", "react-redux"), "redux", "state"),
    Rule(("jotai",), "jotai", "state"),
    Rule(("valtio",), "valtio", "state"),
    Rule(("xstate", "@xstate/react"), "xstate", "state"),
    Rule(("recoil",), "recoil", "state"),
    Rule(("mobx", "mobx-react-lite"), "mobx", "state"),
    Rule(("pinia",), "pinia", "state"),
    # ===== Data fetching =====
    Rule(("@tanstack/react-query",), "react-query", "data-fetching"),
    Rule(("swr",), "swr", "data-fetching"),
    Rule(("axios",), "axios", "http-client"),
    # ===== Forms =====
    Rule(("react-hook-form",), "react-hook-form", "forms"),
    Rule(("formik",), "formik", "forms"),
    Rule(("@tanstack/react-form",), "tanstack-form", "forms"),
    # ===== API =====
    Rule(("@trpc/server", "@trpc/client", "@trpc/react-query"), "trpc", "api"),
    Rule(("graphql", "@apollo/client", "@apollo/server", "urql"), "graphql", "api"),
    # ===== Language / tooling =====
    Rule(("typescript",), "typescript", "language"),
    Rule(("vite",), "vite", "bundler"),
    Rule(("webpack",), "webpack", "bundler"),
    Rule(("esbuild",), "esbuild", "bundler"),
    Rule(("tsup",), "tsup", "bundler"),
    Rule(("eslint",), "eslint", "linter"),
    Rule(("@biomejs/biome",), "biome", "linter"),
    Rule(("prettier",), "prettier", "formatter"),
    # ===== i18n =====
    Rule(("next-intl",), "next-intl", "i18n"),
    Rule(("i18next", "react-i18next"), "i18next", "i18n"),
    Rule(("@lingui/core", "@lingui/react"), "lingui", "i18n"),
    Rule(("react-intl",), "react-intl", "i18n"),
    # ===== Monorepo =====
    Rule(("turbo",), "turborepo", "monorepo"),
    Rule(("nx",), "nx", "monorepo"),
    Rule(("lerna",), "lerna", "monorepo"),
    # ===== Deployment =====
    Rule(("@vercel/analytics", "@vercel/speed-insights"), "vercel", "deployment"),
    # ===== Email =====
    Rule(("resend",), "resend", "email"),
    Rule(("nodemailer",), "nodemailer", "email"),
    Rule(("@sendgrid/mail",), "sendgrid", "email"),
    Rule(("postmark",), "postmark", "email"),
    Rule(("@react-email/components",), "react-email", "email"),
    # ===== File upload =====
    Rule(("uploadthing",), "uploadthing", "file-upload"),
    Rule(("@vercel/blob",), "vercel-blob", "file-upload"),
    Rule(("multer",), "multer", "file-upload"),
    Rule(("@aws-sdk/client-s3",), "s3", "file-upload"),
    # ===== Payments =====
    Rule(("stripe", "@stripe/stripe-js"), "stripe", "payments"),
    Rule(("@lemonsqueezy/lemonsqueezy.js",), "lemonsqueezy", "payments"),
    # ===== Realtime =====
    Rule(("socket.io", "socket.io-client"), "socket.io", "realtime"),
    Rule(("pusher", "pusher-js"), "pusher", "realtime"),
    Rule(("ably",), "ably", "realtime"),
    Rule(("@supabase/realtime-js",), "supabase-realtime", "realtime"),
    # ===== CMS =====
    Rule(("contentlayer", "contentlayer2"), "contentlayer", "cms"),
    Rule(("next-mdx-remote",), "mdx-remote", "cms"),
    Rule(("@sanity/client",), "sanity", "cms"),
    Rule(("@notionhq/client",), "notion", "cms"),
    Rule(("contentful",), "contentful", "cms"),
    Rule(("@strapi/strapi",), "strapi", "cms"),
    # ===== Jobs / Queues =====
    Rule(("bullmq", "bull"), "bullmq", "jobs"),
    Rule(("inngest",), "inngest", "jobs"),
    Rule(("@trigger.dev/sdk",), "trigger-dev", "jobs"),
    # ===== Config / Logging =====
    Rule(("dotenv",), "dotenv", "config"),
    Rule(("@t3-oss/env-nextjs", "@t3-oss/env-core"), "t3-env", "config"),
    Rule(("pino",), "pino", "logging"),
    Rule(("winston",), "winston", "logging"),
)

NOISE_EXACT = frozenset(
    {
        "tslib",
        "core-js",
        "regenerator-runtime",
        "@babel/runtime",
        "@babel/core",
        "postcss",
        "autoprefixer",
        "clsx",
        "tailwind-merge",
        "tailwindcss-animate",
        "lucide-react",
        "ts-node",
        "tsx",
        "rimraf",
        "cross-env",
        "concurrently",
        "npm-run-all",
        "husky",
        "lint-staged",
        "@vitejs/plugin-react",
        "@vitejs/plugin-vue",
        "@sveltejs/vite-plugin-svelte",
        "@sveltejs/adapter-auto",
    }
)

NOISE_PREFIXES: tuple[str, ...] = (
    "@types/",
    "@typescript-eslint/",
    "eslint-config-",
    "eslint-plugin-",
    "@eslint/",
    "prettier-plugin-",
    "@babel/plugin-",
    "@babel/preset-",
)

TABLE = RuleTable(
    rules=RULES,
    frameworks=FRAMEWORKS,
    framework_packages=FRAMEWORK_PACKAGES,
    noise_exact=NOISE_EXACT,
    noise_prefixes=NOISE_PREFIXES,
)


def _normalize_deps(table: dict[str, Any]) -> dict[str, str]:
    # null or non-string versions carry no constraint
    return {
        str(name): normalize_version(spec if isinstance(spec, str) else None)
        for name, spec in table.items()
    }


def _string_table(table: Any) -> dict[str, str]:
    return {str(k): v for k, v in as_table(table).items() if isinstance(v, str)}


def _workspaces(value: Any) -> list[str] | None:
    """Accept both ``["packages/*"]`` and ``{"packages": ["packages/*"]}``."""
    if isinstance(value, dict):
        value = value.get("packages")
    if isinstance(value, list):
        members = [str(m) for m in value if isinstance(m, str)]
        return members or None
    return None


def _package_manager(project_root: Path, declared: Any) -> str:
    if isinstance(declared, str) and declared.strip():
        # "pnpm@8.6.0+sha256.abc" -> "pnpm"
        return declared.strip().split("@", 1)[0]
    for lockfile, manager in _LOCKFILES:
        if (project_root / lockfile).exists():
            log.debug("javascript.package_manager_from_lockfile", lockfile=lockfile)
            return manager
    return "npm"


class JavaScriptAdapter:
    ecosystem = "javascript"

    def file_patterns(self) -> FilePatterns:
        return get_file_patterns(self.ecosystem)

    def parse_manifest(self, project_root: Path) -> ManifestResult:
        path = project_root / "package.json"
        data = load_json(path)

        name = data.get("name")
        version = data.get("version")
        return ManifestResult(
            project_name=name if isinstance(name, str) else project_root.name,
            project_version=version if isinstance(version, str) else "0.0.0",
            dependencies=_normalize_deps(section_table(path, data, "dependencies")),
            dev_dependencies=_normalize_deps(section_table(path, data, "devDependencies")),
            peer_dependencies=_normalize_deps(section_table(path, data, "peerDependencies")),
            scripts=_string_table(data.get("scripts")),
            engines=_string_table(data.get("engines")),
            package_manager=_package_manager(project_root, data.get("packageManager")),
            workspaces=_workspaces(data.get("workspaces")),
            manifest_files=["package.json"],
        )

    def detect_framework(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts,
    ) -> FrameworkInfo | None:
        return detect_framework(TABLE, deps, dev_deps, facts)

    def classify_stack(
        self,
        deps: Mapping[str, str],
        dev_deps: Mapping[str, str],
        facts: StructureFacts | None = None,
    ) -> DetectedStack:
        return classify(TABLE, deps, dev_deps, facts)


register_adapter(JavaScriptAdapter())
