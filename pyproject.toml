[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ostepcode"
version = "1.0.0"
description = "Small runnable operating-systems teaching programs: processes, scheduling, threads, locks, condition variables, semaphores, persistence and UDP."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-systems",
    "education",
    "threads",
    "semaphores",
    "condition-variables",
    "scheduling",
    "concurrency",
]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ostep-sync = "ostepcode.sync:main"
ostep-lottery = "ostepcode.lottery:main"
ostep-pstack = "ostepcode.pstack:main"
ostep-cas = "ostepcode.cas:main"
ostep-procs = "ostepcode.procs:main"
ostep-udp-client = "ostepcode.udp_client:main"
ostep-udp-server = "ostepcode.udp_server:main"
ostep-intro = "ostepcode.intro:main"
ostep-threads = "ostepcode.threads_demo:main"
ostep-bugs = "ostepcode.bugs:main"
ostep-cv = "ostepcode.cv:main"
ostep-sema = "ostepcode.sema:main"

[tool.hatch.build.targets.wheel]
packages = ["ostepcode"]

[tool.pytest.ini_options]
addopts = "-ra"
