"""MCP stdio-based JSON-RPC server for GitHub tools.

MCP (Model Context Protocol) 서버 구현
- stdio(표준 입출력) 기반 JSON-RPC 2.0 통신
- 에이전트가 GitHub API를 직접 다루지 않고 저장소 조회/생성, 커밋, push/pull,
  status 툴을 호출할 수 있도록 하는 브리지

주요 기능:
- initialize: 서버 초기화 및 capability 협상
- tools/list: 사용 가능한 도구 목록 제공
- tools/call: 도구 실행 및 결과 반환

통신 방식:
- 입력: stdin으로 JSON-RPC 요청 수신 (한 줄씩)
- 출력: stdout으로 JSON-RPC 응답 전송 (한 줄씩)
- 로그는 stdout을 오염시키지 않도록 stderr로만 출력

사용 예시:
    $ GITHUB_TOKEN=... python -m src.mcp.server
    (stdin) {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
    (stdout) {"jsonrpc": "2.0", "id": 1, "result": {"tools": [...]}}
"""
import asyncio
import json
import sys
import logging
from typing import Dict, Any, List, Optional
from src.commits.errors import GitToolError, InvalidArguments
from src.mcp.tools import TOOLS_REGISTRY
from src.server.settings import settings, require_github_token

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

# JSON-RPC 에러 코드
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def _tool_listing() -> List[Dict[str, Any]]:
    """TOOL 메타데이터를 MCP tools/list 형식으로 변환합니다."""
    return [
        {
            "name": module.TOOL["name"],
            "title": module.TOOL.get("title", module.TOOL["name"]),
            "description": module.TOOL.get("description", ""),
            "inputSchema": module.TOOL.get("input_schema", {"type": "object"}),
        }
        for module in TOOLS_REGISTRY.values()
    ]


def _error(request_id: Any, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


class MCPServer:
    """Stdio-based MCP JSON-RPC server.

    - stdio를 통한 양방향 통신
    - 비동기 처리로 도구 실행
    - 도구 에러는 kind/message를 담은 구조화된 JSON-RPC 에러로 변환
    """

    def __init__(self):
        self.initialized = False

    async def handle_request(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """JSON-RPC 요청을 처리하고 응답을 반환합니다.

        id가 없는 요청(notification, 예: notifications/initialized)에는
        응답하지 않으므로 None을 반환합니다.

        JSON-RPC 에러 코드:
        - -32601: Method not found
        - -32602: Invalid params (인자 검증 실패, 알 수 없는 도구)
        - -32603: Internal error (도구 실행 실패)
        """
        method = request.get("method")
        params = request.get("params") or {}
        request_id = request.get("id")

        if "id" not in request:
            logger.debug("Received notification: %s", method)
            return None

        try:
            if method == "initialize":
                return await self.initialize(request_id, params)
            elif method == "ping":
                return {"jsonrpc": "2.0", "id": request_id, "result": {}}
            elif method == "tools/list":
                return await self.list_tools(request_id)
            elif method == "tools/call":
                return await self.call_tool(request_id, params)
            else:
                return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        except Exception as e:
            logger.exception("Error handling request")
            return _error(request_id, INTERNAL_ERROR, f"Internal error: {str(e)}")

    async def initialize(self, request_id: Any, params: Dict[str, Any]) -> Dict[str, Any]:
        """서버 초기화 요청을 처리합니다.

        Returns:
            protocolVersion, serverInfo, capabilities(tools)
        """
        self.initialized = True
        logger.info("MCP server initialized")

        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "protocolVersion": params.get("protocolVersion") or PROTOCOL_VERSION,
                "serverInfo": {
                    "name": "github-tools-mcp",
                    "version": "0.1.0"
                },
                "capabilities": {
                    "tools": {}
                }
            }
        }

    async def list_tools(self, request_id: Any) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "tools": _tool_listing()
            }
        }

    async def call_tool(self, request_id: Any, params: Dict[str, Any]) -> Dict[str, Any]:
        """도구 실행 요청을 처리합니다.

        처리 플로우:
        1. tool_name과 arguments 추출
        2. 도구가 등록되어 있는지 확인
        3. await module.run(arguments) 비동기 실행
        4. 결과를 MCP content(JSON text) 형식으로 반환

        실패 시 부분 결과 없이 하나의 구조화된 에러만 반환합니다.
        """
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if tool_name not in TOOLS_REGISTRY:
            return _error(request_id, INVALID_PARAMS, f"Tool not found: {tool_name}")

        try:
            result = await TOOLS_REGISTRY[tool_name].run(arguments)
        except InvalidArguments as e:
            logger.warning("Invalid arguments for %s: %s", tool_name, e.message)
            return _error(request_id, INVALID_PARAMS, e.message, e.to_dict())
        except GitToolError as e:
            logger.error("Tool %s failed with %s: %s", tool_name, e.kind, e.message)
            return _error(request_id, INTERNAL_ERROR, e.message, e.to_dict())
        except Exception as e:
            logger.exception("Error executing tool %s", tool_name)
            return _error(
                request_id,
                INTERNAL_ERROR,
                f"Tool execution error: {str(e)}",
                {"kind": type(e).__name__, "message": str(e)},
            )

        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "content": [
                    {
                        "type": "text",
                        "text": json.dumps(result, indent=2)
                    }
                ]
            }
        }

    async def run(self):
        """stdio 기반 서버 루프를 실행합니다.

        루프 동작:
        1. stdin에서 한 줄 읽기 (블로킹이므로 executor 사용)
        2. JSON 파싱 (실패 시 -32700 응답)
        3. handle_request()로 처리
        4. 응답이 있으면 stdout으로 출력 후 flush

        종료 조건: stdin EOF 또는 KeyboardInterrupt
        """
        logger.info("Starting GitHub MCP server on stdio")
        loop = asyncio.get_running_loop()

        while True:
            try:
                line = await loop.run_in_executor(None, sys.stdin.readline)

                # EOF (연결 종료)
                if not line:
                    break
                if not line.strip():
                    continue

                try:
                    request = json.loads(line.strip())
                except json.JSONDecodeError as e:
                    logger.error(f"JSON decode error: {e}")
                    response = _error(None, PARSE_ERROR, f"Parse error: {e}")
                else:
                    response = await self.handle_request(request)

                if response is not None:
                    sys.stdout.write(json.dumps(response) + "\n")
                    sys.stdout.flush()

            except KeyboardInterrupt:
                logger.info("Server interrupted")
                break
            except Exception as e:
                logger.error(f"Server error: {e}")


def configure_logging() -> None:
    # stdout은 프로토콜 채널이므로 로그는 stderr로 보냅니다
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


async def main():
    """메인 엔트리 포인트.

    Claude Desktop 설정 예시 (claude_desktop_config.json):
        {
          "mcpServers": {
            "github-tools": {
              "command": "github-tools-mcp",
              "env": {"GITHUB_TOKEN": "..."}
            }
          }
        }
    """
    server = MCPServer()
    await server.run()


def cli() -> None:
    """Console script entry point. GITHUB_TOKEN이 없으면 시작하지 않습니다."""
    configure_logging()
    try:
        require_github_token()
    except RuntimeError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    asyncio.run(main())


if __name__ == "__main__":
    cli()
