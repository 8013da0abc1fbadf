"""Fixed completion vocabularies."""

# Origami has a Chinese and an English spelling for every keyword; both are offered.
CHINESE_KEYWORDS = (
    "如果", "否则", "否则如果", "当", "为", "函数", "返回", "类", "接口",
    "公共", "私有", "保护", "静态", "抽象", "最终", "常量", "变量",
    "尝试", "捕获", "最终", "抛出", "新建", "这个", "父类", "自己",
    "真", "假", "空", "未定义",
)  # fmt: skip

ENGLISH_KEYWORDS = (
    "if", "else", "elseif", "while", "for", "function", "return", "class", "interface",
    "public", "private", "protected", "static", "abstract", "final", "const", "var",
    "try", "catch", "finally", "throw", "new", "this", "parent", "self",
    "true", "false", "null", "undefined",
)  # fmt: skip

KEYWORDS = CHINESE_KEYWORDS + ENGLISH_KEYWORDS

BUILTIN_FUNCTIONS = (
    "打印", "输出", "长度", "类型", "转换", "解析", "格式化",
    "print", "echo", "len", "type", "convert", "parse", "format",
)  # fmt: skip

# Origami runs on a PHP runtime and may call into it directly.
PHP_FUNCTIONS = (
    "array_map", "array_filter", "array_reduce", "array_merge", "array_push",
    "strlen", "substr", "strpos", "str_replace", "explode", "implode",
    "json_encode", "json_decode", "file_get_contents", "file_put_contents",
    "preg_match", "preg_replace", "trim", "ltrim", "rtrim",
)  # fmt: skip

GO_KEYWORDS = (
    "go", "func", "var", "const", "type", "struct", "interface",
    "package", "import", "chan", "select", "defer", "range",
    "make", "append", "copy", "delete", "len", "cap",
)  # fmt: skip

# Offered after `->`, `::` or `.` whatever the receiver is.
MEMBER_METHODS = (
    "toString", "valueOf", "length", "size", "isEmpty",
    "get", "set", "add", "remove", "contains",
    "map", "filter", "reduce", "forEach", "find",
)  # fmt: skip

MEMBER_ACCESS_OPERATORS = ("->", "::")
MEMBER_ACCESS_CHAR = "."

SNIPPETS: dict[str, str] = {
    "if": "if (${1:condition}) {\n\t${2:// code}\n}",
    "如果": "如果 (${1:条件}) {\n\t${2:// 代码}\n}",
    "for": "for (${1:i} = 0; ${1:i} < ${2:length}; ${1:i}++) {\n\t${3:// code}\n}",
    "为": "为 (${1:i} = 0; ${1:i} < ${2:长度}; ${1:i}++) {\n\t${3:// 代码}\n}",
    "function": "function ${1:name}(${2:params}) {\n\t${3:// code}\n\treturn ${4:result};\n}",
    "函数": "函数 ${1:名称}(${2:参数}) {\n\t${3:// 代码}\n\t返回 ${4:结果};\n}",
    "class": "class ${1:ClassName} {\n\t${2:// properties and methods}\n}",
    "类": "类 ${1:类名} {\n\t${2:// 属性和方法}\n}",
}
