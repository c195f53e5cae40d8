"""Hand-authored lessons shipped with the application."""

from __future__ import annotations

from typing import Tuple

from .lessons import Challenge, Concept, Example, Lesson, Quiz, Section, SectionContent

_VARIABLES = SectionContent(
    why_care=(
        "Variables are like labeled boxes where you store information. Without them, your code "
        "can't remember anything! Think of them as your app's short-term memory."
    ),
    concepts=[
        Concept(
            title="let & const",
            preview="Modern ways to declare variables",
            details=(
                "Use <code>let</code> when the value might change, and <code>const</code> when it "
                "won't. It's like choosing between a whiteboard (let) and a permanent marker (const)."
                "<br><br><strong>Example:</strong><br><code>let score = 0; // Can change<br>"
                'const playerName = "Alex"; // Can\'t change</code>'
            ),
        ),
        Concept(
            title="Data Types",
            preview="Numbers, strings, booleans, and more",
            details=(
                "JavaScript has several types of data:<br>"
                "• <strong>Numbers:</strong> <code>42</code>, <code>3.14</code><br>"
                "• <strong>Strings:</strong> <code>\"Hello\"</code>, <code>'World'</code><br>"
                "• <strong>Booleans:</strong> <code>true</code>, <code>false</code><br>"
                "• <strong>Arrays:</strong> <code>[1, 2, 3]</code><br>"
                "• <strong>Objects:</strong> <code>{name: \"Alex\", age: 25}</code>"
            ),
        ),
    ],
    examples=[
        Example(
            title="Real-World Example: Shopping Cart",
            code=(
                "let cartTotal = 0;\nconst taxRate = 0.08;\nlet itemCount = 0;\n\n"
                "// Add item to cart\ncartTotal += 29.99;\nitemCount++;\n\n"
                "console.log(`Total: $${cartTotal}`);\nconsole.log(`Items: ${itemCount}`);"
            ),
            explanation="This is how an online store might track your shopping cart!",
        )
    ],
    quiz=Quiz(
        question="You need to store a user's email address. Which should you use?",
        options=[
            'let email = "user@example.com" - because emails can change',
            'const email = "user@example.com" - because the value won\'t change during the session',
            'var email = "user@example.com" - because that\'s the old way',
            "Just use the email directly without storing it",
        ],
        correct_index=0,
        explanation=(
            "Use <code>let</code> because a user might update their email. <code>const</code> is "
            "for values that never change, like <code>const MAX_LOGIN_ATTEMPTS = 3;</code>"
        ),
    ),
    challenge=Challenge(
        title="Mini Challenge: Create a Profile",
        description=(
            "Create variables to store a user profile with name (can't change), age (can change), "
            "and isActive (boolean)."
        ),
        hint="Think about which values might need to be updated later!",
        solution='const name = "Alex";\nlet age = 25;\nlet isActive = true;',
    ),
)

_FUNCTIONS = SectionContent(
    why_care=(
        "Functions are reusable blocks of code. Instead of writing the same code 100 times, you "
        "write it once and call it whenever you need it. It's like saving a recipe instead of "
        "memorizing it!"
    ),
    concepts=[
        Concept(
            title="Function Declaration",
            preview="The traditional way to create functions",
            details=(
                "<code>function greet(name) {<br>&nbsp;&nbsp;return `Hello, ${name}!`;<br>}<br><br>"
                'greet("Alex"); // "Hello, Alex!"</code>'
            ),
        ),
        Concept(
            title="Arrow Functions",
            preview="Modern, concise syntax",
            details=(
                "Arrow functions are shorter and cleaner:<br><br>"
                "<code>const greet = (name) => `Hello, ${name}!`;</code><br><br>Same result, less typing!"
            ),
        ),
    ],
    examples=[
        Example(
            title="Real-World: Calculate Discount",
            code=(
                "const calculateDiscount = (price, discount) => {\n"
                "  const savings = price * (discount / 100);\n  return price - savings;\n};\n\n"
                "const finalPrice = calculateDiscount(100, 20);\n"
                "console.log(`You pay: $${finalPrice}`); // $80"
            ),
            explanation="This is how websites calculate sale prices!",
        )
    ],
    quiz=Quiz(
        question="What's the main benefit of using functions?",
        options=[
            "They make your code run faster",
            "You can reuse code instead of repeating it",
            "They make your code look fancier",
            "Functions are required by JavaScript",
        ],
        correct_index=1,
        explanation=(
            "Functions let you write code once and use it many times. This makes your code "
            "cleaner, easier to maintain, and reduces bugs!"
        ),
    ),
    challenge=Challenge(
        title="Challenge: Temperature Converter",
        description="Write a function that converts Celsius to Fahrenheit. Formula: (C × 9/5) + 32",
        hint="Create a function that takes celsius as a parameter and returns fahrenheit",
        solution=(
            "const celsiusToFahrenheit = (celsius) => {\n  return (celsius * 9/5) + 32;\n};\n\n"
            "console.log(celsiusToFahrenheit(0));  // 32\n"
            "console.log(celsiusToFahrenheit(100)); // 212"
        ),
    ),
)

_ARRAYS = SectionContent(
    why_care=(
        "Arrays let you store lists of things - like a playlist of songs, a todo list, or a "
        "shopping cart. Objects let you group related information together, like all the details "
        "about a user."
    ),
    concepts=[
        Concept(
            title="Arrays",
            preview="Lists of items",
            details=(
                "Arrays store multiple values in order:<br><br>"
                '<code>const fruits = ["apple", "banana", "orange"];<br>'
                'console.log(fruits[0]); // "apple"<br>'
                'fruits.push("grape"); // Add to end</code>'
            ),
        ),
        Concept(
            title="Objects",
            preview="Grouped information",
            details=(
                "Objects store key-value pairs:<br><br><code>const user = {<br>"
                '&nbsp;&nbsp;name: "Alex",<br>&nbsp;&nbsp;age: 25,<br>'
                '&nbsp;&nbsp;email: "alex@example.com"<br>};<br><br>'
                'console.log(user.name); // "Alex"</code>'
            ),
        ),
    ],
    examples=[
        Example(
            title="Real-World: Todo List App",
            code=(
                "const todos = [\n"
                '  { id: 1, task: "Learn JavaScript", done: false },\n'
                '  { id: 2, task: "Build a project", done: false }\n];\n\n'
                "// Mark first todo as done\ntodos[0].done = true;\n\n"
                '// Add new todo\ntodos.push({ id: 3, task: "Deploy app", done: false });'
            ),
            explanation="This is exactly how todo apps store your tasks!",
        )
    ],
    quiz=Quiz(
        question="When should you use an array vs an object?",
        options=[
            "Use arrays for ordered lists, objects for related properties",
            "Arrays are faster, always use arrays",
            "Objects are newer, always use objects",
            "It doesn't matter, they're the same thing",
        ],
        correct_index=0,
        explanation=(
            "Use arrays when you need an ordered list (like [item1, item2, item3]). Use objects "
            'when you need to group related properties (like {name: "Alex", age: 25}).'
        ),
    ),
    challenge=Challenge(
        title="Challenge: Student Records",
        description=(
            "Create an array of student objects. Each student should have name, grade, and age "
            "properties."
        ),
        hint="Combine arrays and objects!",
        solution=(
            "const students = [\n"
            '  { name: "Alex", grade: "A", age: 20 },\n'
            '  { name: "Sam", grade: "B", age: 19 },\n'
            '  { name: "Jordan", grade: "A", age: 21 }\n];\n\n'
            'console.log(students[0].name); // "Alex"'
        ),
    ),
)

_COMPONENTS = SectionContent(
    why_care=(
        "React components are like LEGO blocks - you build small, reusable pieces and combine "
        "them to create complex UIs. This makes your code organized and easier to maintain!"
    ),
    concepts=[
        Concept(
            title="What is a Component?",
            preview="Reusable pieces of UI",
            details=(
                "A component is a JavaScript function that returns HTML-like code (JSX):<br><br>"
                "<code>function Button() {<br>"
                "&nbsp;&nbsp;return &lt;button&gt;Click me!&lt;/button&gt;;<br>}</code>"
            ),
        ),
        Concept(
            title="Props",
            preview="Passing data to components",
            details=(
                "Props let you customize components:<br><br><code>function Greeting({ name }) {<br>"
                "&nbsp;&nbsp;return &lt;h1&gt;Hello, {name}!&lt;/h1&gt;;<br>}<br><br>"
                '&lt;Greeting name="Alex" /&gt;</code>'
            ),
        ),
    ],
    examples=[
        Example(
            title="Real-World: User Card",
            code=(
                "function UserCard({ name, role, avatar }) {\n  return (\n"
                '    <div className="card">\n      <img src={avatar} alt={name} />\n'
                "      <h2>{name}</h2>\n      <p>{role}</p>\n    </div>\n  );\n}\n\n"
                '// Use it:\n<UserCard \n  name="Alex" \n  role="Developer" \n  avatar="/alex.jpg" \n/>'
            ),
            explanation="This is how social media sites display user profiles!",
        )
    ],
    quiz=Quiz(
        question="What's the main advantage of React components?",
        options=[
            "They make websites load faster",
            "You can reuse UI pieces throughout your app",
            "They automatically add CSS styling",
            "They work without JavaScript",
        ],
        correct_index=1,
        explanation=(
            "Components let you build reusable UI pieces. Create a Button component once, use it "
            "everywhere!"
        ),
    ),
    challenge=Challenge(
        title="Challenge: Product Card",
        description="Create a ProductCard component that displays product name, price, and an image.",
        hint="Use props to pass the product information",
        solution=(
            "function ProductCard({ name, price, image }) {\n  return (\n"
            '    <div className="product-card">\n      <img src={image} alt={name} />\n'
            '      <h3>{name}</h3>\n      <p className="price">${price}</p>\n'
            "      <button>Add to Cart</button>\n    </div>\n  );\n}"
        ),
    ),
)

_DESIGN = SectionContent(
    why_care=(
        "Good design isn't just about making things pretty - it's about making them easy and "
        "enjoyable to use. People judge websites in 0.05 seconds, so design matters!"
    ),
    concepts=[
        Concept(
            title="Color Theory",
            preview="Choose colors that work together",
            details=(
                "Use a color palette with:<br>"
                "• <strong>Primary color:</strong> Your main brand color<br>"
                "• <strong>Secondary color:</strong> Complements the primary<br>"
                "• <strong>Accent color:</strong> For calls-to-action<br>"
                "• <strong>Neutrals:</strong> Grays for text and backgrounds<br><br>"
                "Pro tip: Use tools like Coolors or Adobe Color to find palettes!"
            ),
        ),
        Concept(
            title="Typography",
            preview="Make text readable and beautiful",
            details=(
                "Good typography rules:<br>• Use max 2-3 font families<br>"
                "• Headings: bold, larger size<br>• Body text: 16px minimum<br>"
                "• Line height: 1.5-1.7 for readability<br>"
                "• Contrast: dark text on light backgrounds"
            ),
        ),
        Concept(
            title="White Space",
            preview="Give your content room to breathe",
            details=(
                "White space (empty space) makes designs look clean and professional. Don't cram "
                "everything together!<br><br>Think of it like a nice room - you need space between "
                "furniture to move around comfortably."
            ),
        ),
    ],
    examples=[
        Example(
            title="Before & After: Button Design",
            code=(
                "/* ❌ Bad */\nbutton {\n  background: red;\n  color: yellow;\n  padding: 2px;\n"
                "  font-size: 10px;\n}\n\n/* ✅ Good */\nbutton {\n  background: #6366f1;\n"
                "  color: white;\n  padding: 12px 24px;\n  font-size: 16px;\n"
                "  border-radius: 8px;\n  border: none;\n  cursor: pointer;\n}"
            ),
            explanation="The good version has better colors, spacing, and is easier to click!",
        )
    ],
    quiz=Quiz(
        question="Why is white space important in design?",
        options=[
            "It makes designs load faster",
            "It helps content breathe and improves readability",
            "It saves on printing costs",
            "It's a requirement for all websites",
        ],
        correct_index=1,
        explanation=(
            "White space gives your content room to breathe, making it easier to read and more "
            "pleasant to look at. Cramped designs feel overwhelming!"
        ),
    ),
    challenge=Challenge(
        title="Challenge: Design a Card",
        description=(
            "Write CSS for a card component with good spacing, readable typography, and a nice "
            "color scheme."
        ),
        hint="Think about padding, margin, font-size, and colors!",
        solution=(
            ".card {\n  background: white;\n  padding: 24px;\n  border-radius: 12px;\n"
            "  box-shadow: 0 2px 8px rgba(0,0,0,0.1);\n  max-width: 400px;\n}\n\n"
            ".card h2 {\n  color: #1a1a1a;\n  font-size: 24px;\n  margin-bottom: 12px;\n}\n\n"
            ".card p {\n  color: #666;\n  font-size: 16px;\n  line-height: 1.6;\n}"
        ),
    ),
)

STATIC_LESSONS: Tuple[Lesson, ...] = (
    Lesson(
        id="javascript_basics",
        title="JavaScript Fundamentals",
        icon="🚀",
        subtitle="Master the building blocks of modern web development",
        description="Learn JavaScript from scratch with hands-on examples",
        duration="45 min",
        difficulty="Beginner",
        sections=[
            Section(id="variables", title="Variables & Data Types", icon="📦", content=_VARIABLES),
            Section(id="functions", title="Functions", icon="⚙️", content=_FUNCTIONS),
            Section(id="arrays", title="Arrays & Objects", icon="🗂️", content=_ARRAYS),
        ],
    ),
    Lesson(
        id="react_intro",
        title="React Essentials",
        icon="⚛️",
        subtitle="Build interactive UIs with React",
        description="Learn React fundamentals and create your first component",
        duration="60 min",
        difficulty="Intermediate",
        sections=[Section(id="components", title="Components", icon="🧩", content=_COMPONENTS)],
    ),
    Lesson(
        id="web_design",
        title="Web Design Principles",
        icon="🎨",
        subtitle="Create beautiful, user-friendly interfaces",
        description="Learn design fundamentals that make websites look amazing",
        duration="40 min",
        difficulty="Beginner",
        sections=[Section(id="design_basics", title="Design Basics", icon="✨", content=_DESIGN)],
    ),
)

__all__ = ["STATIC_LESSONS"]
