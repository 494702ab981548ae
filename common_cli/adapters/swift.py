"""Swift 工具链 Adapter：swift（build/test/run/package）、swiftc、swiftlint。"""

from __future__ import annotations

import enum
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.models.shell import Executable


class SwiftBuildConfiguration(str, enum.Enum):
    """`swift build --configuration` 的取值。"""

    DEBUG = "debug"
    RELEASE = "release"


class SwiftBuildProduct(BaseModel):
    """`swift build --product` 的产品名；首尾空白会被去掉，不能为空。"""

    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name must not be empty")
        return v


class SwiftPackagePath(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str

    @field_validator("path")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Package path must not be empty")
        return v


class SwiftBuildOptions(BaseModel):
    configuration: Optional[SwiftBuildConfiguration] = None
    product: Optional[SwiftBuildProduct] = None
    package_path: Optional[SwiftPackagePath] = None

    def make_arguments(self) -> list[str]:
        args = ["build"]
        if self.configuration is not None:
            args += ["--configuration", self.configuration.value]
        if self.product is not None:
            args += ["--product", self.product.name]
        if self.package_path is not None:
            args += ["--package-path", self.package_path.path]
        return args


class SwiftTool(BaseCLI, Versioned):
    """swift 命令封装。"""

    executable = Executable.named("swift")

    async def run(self, args: Sequence[str]) -> str:
        return await self._run(args)

    async def build(self, extra: Sequence[str] = ()) -> str:
        """`swift build` 加原样透传的参数。"""
        return await self._run(["build", *extra])

    async def build_typed(
        self,
        configuration: SwiftBuildConfiguration | None = None,
        product: SwiftBuildProduct | str | None = None,
        package_path: SwiftPackagePath | str | None = None,
    ) -> str:
        """类型化的 `swift build`；product / package_path 可直接传字符串。"""
        if isinstance(product, str):
            product = SwiftBuildProduct(name=product)
        if isinstance(package_path, str):
            package_path = SwiftPackagePath(path=package_path)
        options = SwiftBuildOptions(
            configuration=configuration, product=product, package_path=package_path
        )
        return await self._run(options.make_arguments())

    async def package_describe_json(self) -> str:
        return await self._run(["package", "describe", "--type", "json"])

    async def test(
        self,
        filter: str | None = None,
        parallel: bool = True,
        enable_code_coverage: bool = False,
        extra: Sequence[str] = (),
    ) -> str:
        args = ["test"]
        if enable_code_coverage:
            args.append("--enable-code-coverage")
        if parallel:
            args.append("--parallel")
        if filter is not None:
            args += ["--filter", filter]
        args.extend(extra)
        return await self._run(args)

    async def run_executable(
        self,
        product: str | None = None,
        args: Sequence[str] = (),
        configuration: str | None = None,
        extra: Sequence[str] = (),
    ) -> str:
        """`swift run [--configuration <cfg>] [extra...] [product] [args...]`"""
        run_args = ["run"]
        if configuration is not None:
            run_args += ["--configuration", configuration]
        run_args.extend(extra)
        if product is not None:
            run_args.append(product)
        run_args.extend(args)
        return await self._run(run_args)

    # ── package ──

    async def package_resolve(self, extra: Sequence[str] = ()) -> str:
        return await self._run(["package", "resolve", *extra])

    async def package_update(self, packages: Sequence[str] = (), extra: Sequence[str] = ()) -> str:
        args = ["package", "update"]
        for p in packages:
            args += ["--package", p]
        args.extend(extra)
        return await self._run(args)

    async def package_init(self, type: str = "library", name: str | None = None) -> str:
        """type 为 library 或 executable。"""
        args = ["package", "init", "--type", type]
        if name is not None:
            args += ["--name", name]
        return await self._run(args)

    async def package_show_dependencies(self, format: str | None = None) -> str:
        args = ["package", "show-dependencies"]
        if format is not None:
            args += ["--format", format]
        return await self._run(args)

    async def package_dump_manifest(self) -> str:
        return await self._run(["package", "dump-package"])


# ── swiftc ──

class SwiftcCompileOptions(BaseModel):
    source: str
    output: str
    extra: list[str] = Field(default_factory=list)

    @field_validator("source", "output")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Path must not be empty")
        return v

    def make_arguments(self) -> list[str]:
        return [self.source, "-o", self.output, *self.extra]


class Swiftc(BaseCLI):
    """swiftc 编译器：把单个源文件编译到指定输出路径。"""

    executable = Executable.named("swiftc")

    async def compile(self, source: str, output: str, extra: Sequence[str] = ()) -> str:
        options = SwiftcCompileOptions(source=source, output=output, extra=list(extra))
        return await self.compile_options(options)

    async def compile_options(self, options: SwiftcCompileOptions) -> str:
        return await self._run(options.make_arguments())


class Swiftlint(BaseCLI, Versioned):
    executable = Executable.named("swiftlint")

    async def lint(self, path: str | None = None) -> str:
        return await self._run([path] if path is not None else [])
